from __future__ import annotations

from enum import Enum


class ReasonCode(str, Enum):
    """Outcome of one attendance claim evaluation."""

    ACCEPTED = "ACCEPTED"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    STALE_READING = "STALE_READING"
    LOW_ACCURACY = "LOW_ACCURACY"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    MISSING_FIELDS = "MISSING_FIELDS"
    INTEGRITY_MISMATCH = "INTEGRITY_MISMATCH"
    SUSPICIOUS_MOVEMENT = "SUSPICIOUS_MOVEMENT"


class LocationErrorCode(str, Enum):
    """Why a device location could not be acquired (caller-side, not a ReasonCode)."""

    PERMISSION_DENIED = "PERMISSION_DENIED"
    POSITION_UNAVAILABLE = "POSITION_UNAVAILABLE"
    TIMEOUT = "TIMEOUT"
    UNSUPPORTED = "UNSUPPORTED"
    LOW_ACCURACY = "LOW_ACCURACY"
    UNKNOWN = "UNKNOWN"


class IntegrityAlgorithm(str, Enum):
    CHECKSUM = "checksum"
    HMAC = "hmac"


class HistoryKeying(str, Enum):
    """How claim attempts are grouped for the impossible-movement check."""

    SESSION = "session"
    SESSION_STUDENT = "session_student"
