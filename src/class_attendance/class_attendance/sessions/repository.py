from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SessionDescriptor


class SessionRepository(Protocol):
    def add(self, session: SessionDescriptor) -> SessionDescriptor:
        raise NotImplementedError

    def get_by_id(self, session_id: str) -> Optional[SessionDescriptor]:
        raise NotImplementedError

    def list_all(self) -> Sequence[SessionDescriptor]:
        raise NotImplementedError
