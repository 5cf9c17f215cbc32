from __future__ import annotations

from ...location.model import GeoReading
from ..hashing import compute_integrity_hash
from .base import IntegritySigner


class ChecksumSigner(IntegritySigner):
    """Weak 32-bit checksum, compatible with already printed QR codes."""

    def sign(self, location: GeoReading, session_id: str) -> str:
        return compute_integrity_hash(location, session_id, self._secret)
