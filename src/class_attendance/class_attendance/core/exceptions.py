from __future__ import annotations

from .enums import LocationErrorCode


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class MalformedInputError(ValidationError):
    """Raised when a session, reading or QR payload lacks required fields.

    This is a caller-programming error, distinct from a verification rejection.
    """

    def __init__(self, message: str, *, missing: tuple[str, ...] = ()):
        super().__init__(message)
        self.missing = missing


class LocationAcquisitionError(DomainError):
    """Raised when the device location cannot be obtained."""

    def __init__(self, code: LocationErrorCode, message: str, detail: str = ""):
        super().__init__(message)
        self.code = code
        self.detail = detail
