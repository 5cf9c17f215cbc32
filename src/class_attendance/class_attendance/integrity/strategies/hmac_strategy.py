from __future__ import annotations

from ...location.model import GeoReading
from ..hashing import compute_integrity_mac
from .base import IntegritySigner


class HmacSigner(IntegritySigner):
    """HMAC-SHA256 keyed with the lecturer-held secret."""

    def sign(self, location: GeoReading, session_id: str) -> str:
        return compute_integrity_mac(location, session_id, self._secret)
