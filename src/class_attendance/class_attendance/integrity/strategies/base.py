from __future__ import annotations

import hmac
from abc import ABC, abstractmethod

from ...location.model import GeoReading


class IntegritySigner(ABC):
    """Strategy Pattern: encapsulate how a session payload is signed."""

    def __init__(self, secret: str):
        self._secret = secret

    @abstractmethod
    def sign(self, location: GeoReading, session_id: str) -> str:
        raise NotImplementedError

    def verify(self, location: GeoReading, session_id: str, digest: str) -> bool:
        expected = self.sign(location, session_id)
        return hmac.compare_digest(expected.encode("utf-8"), str(digest).encode("utf-8"))
