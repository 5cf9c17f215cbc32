from __future__ import annotations

import threading
from typing import Optional, Sequence

from .model import SessionDescriptor


class InMemorySessionRepository:
    """Process-lifetime session store; data is lost on restart."""

    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: dict[str, SessionDescriptor] = {}

    def add(self, session: SessionDescriptor) -> SessionDescriptor:
        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def get_by_id(self, session_id: str) -> Optional[SessionDescriptor]:
        with self._lock:
            return self._sessions.get(str(session_id))

    def list_all(self) -> Sequence[SessionDescriptor]:
        with self._lock:
            return list(self._sessions.values())
