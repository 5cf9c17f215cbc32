from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import IntegrityAlgorithm
from ..core.exceptions import ValidationError
from .strategies.base import IntegritySigner
from .strategies.checksum_strategy import ChecksumSigner
from .strategies.hmac_strategy import HmacSigner


@dataclass
class IntegritySignerFactory:
    """Factory Pattern: choose the signer configured for this deployment."""

    def for_algorithm(self, algorithm: IntegrityAlgorithm | str, secret: str) -> IntegritySigner:
        try:
            algorithm = IntegrityAlgorithm(algorithm)
        except ValueError:
            raise ValidationError(f"Unknown integrity algorithm: {algorithm}")

        if not secret:
            raise ValidationError("Integrity secret must not be empty")

        if algorithm == IntegrityAlgorithm.HMAC:
            return HmacSigner(secret)
        return ChecksumSigner(secret)
