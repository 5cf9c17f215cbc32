from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Hashable, Optional, Sequence

from ..core.constants import (
    DEFAULT_MAX_ACCURACY_METERS,
    DEFAULT_MAX_READING_AGE_MS,
    SUSPICIOUS_DISTANCE_METERS,
    SUSPICIOUS_ELAPSED_MS,
    SUSPICIOUS_WINDOW,
)
from ..core.enums import HistoryKeying, ReasonCode
from ..core.exceptions import MalformedInputError
from ..integrity.strategies.base import IntegritySigner
from ..sessions.model import SessionDescriptor
from .geo import haversine_distance_meters
from .history import AttemptHistoryStore
from .model import AttendanceClaimAttempt, GeoReading, VerificationResult

logger = logging.getLogger(__name__)

MESSAGES = {
    ReasonCode.ACCEPTED: "Location verified successfully!",
    ReasonCode.STALE_READING: "Location data is too old. Please get a fresh location.",
    ReasonCode.LOW_ACCURACY: "Location accuracy is too low. Please move to an area with better GPS signal.",
    ReasonCode.INTEGRITY_MISMATCH: "Session data failed verification. Please scan the QR code again.",
    ReasonCode.SUSPICIOUS_MOVEMENT: "Impossible movement detected. Location data appears to be manipulated.",
    ReasonCode.SESSION_EXPIRED: "This QR code has expired. Please ask your lecturer for a new one.",
    ReasonCode.MISSING_FIELDS: "Invalid session data. Please scan a valid session QR code.",
}


def out_of_range_message(distance_meters: float, tolerance_meters: int) -> str:
    return (
        f"You are {round(distance_meters)}m away from the class location. "
        f"Required: within {tolerance_meters}m."
    )


def rejection(reason: ReasonCode, distance_meters: Optional[float] = None) -> VerificationResult:
    return VerificationResult(
        accepted=False,
        reason_code=reason,
        distance_meters=distance_meters,
        message=MESSAGES.get(reason, reason.value),
    )


def is_impossible_movement(readings: Sequence[GeoReading]) -> bool:
    """True if any adjacent pair moved > 1 km in < 30 s.

    Needs at least ``SUSPICIOUS_WINDOW`` readings; only the most recent
    window is examined.
    """
    if len(readings) < SUSPICIOUS_WINDOW:
        return False

    window = list(readings)[-SUSPICIOUS_WINDOW:]
    for prev, curr in zip(window, window[1:]):
        distance = haversine_distance_meters(prev, curr)
        elapsed = curr.captured_at_ms - prev.captured_at_ms
        if distance > SUSPICIOUS_DISTANCE_METERS and elapsed < SUSPICIOUS_ELAPSED_MS:
            return True
    return False


@dataclass(frozen=True)
class VerifierConfig:
    max_reading_age_ms: int = DEFAULT_MAX_READING_AGE_MS
    max_accuracy_meters: float = DEFAULT_MAX_ACCURACY_METERS
    history_keying: HistoryKeying = HistoryKeying.SESSION

    @classmethod
    def from_settings(cls, settings) -> "VerifierConfig":
        return cls(
            max_reading_age_ms=int(getattr(settings, "MAX_READING_AGE_MS", DEFAULT_MAX_READING_AGE_MS)),
            max_accuracy_meters=float(getattr(settings, "MAX_ACCURACY_METERS", DEFAULT_MAX_ACCURACY_METERS)),
            history_keying=HistoryKeying(getattr(settings, "HISTORY_KEYING", HistoryKeying.SESSION.value)),
        )


@dataclass
class LocationVerifier:
    """Decide whether one attendance claim attempt is accepted.

    Checks run in a fixed order and the first failure wins:
    integrity hash, reading freshness, reading accuracy, distance to the
    anchor. An otherwise accepted attempt is still rejected when the recent
    attempt history shows impossible movement. Every well-formed call is
    recorded in the history, accepted or not.
    """

    signer: IntegritySigner
    config: VerifierConfig = field(default_factory=VerifierConfig)
    history: AttemptHistoryStore = field(default_factory=AttemptHistoryStore)

    def evaluate(
        self,
        session: SessionDescriptor,
        reading: GeoReading,
        now: int,
        *,
        student_id: Optional[str] = None,
    ) -> VerificationResult:
        self._require_well_formed(session, reading)

        result = self._decide(session, reading, now)
        key = self.history_key(session.session_id, student_id)

        if result.accepted:
            previous = [a.student_reading for a in self.history.recent(key, SUSPICIOUS_WINDOW - 1)]
            if is_impossible_movement(previous + [reading]):
                logger.warning("Suspicious movement for session %s (student=%s)", session.session_id, student_id)
                result = rejection(ReasonCode.SUSPICIOUS_MOVEMENT, result.distance_meters)

        self.history.record(
            key,
            AttendanceClaimAttempt(
                session_id=session.session_id,
                student_reading=reading,
                was_accepted=result.accepted,
                evaluated_at_ms=int(now),
                student_id=student_id,
            ),
        )

        if not result.accepted:
            logger.info(
                "Claim rejected for session %s: %s (distance=%s)",
                session.session_id,
                result.reason_code.value,
                result.distance_meters,
            )
        return result

    def history_key(self, session_id: str, student_id: Optional[str]) -> Hashable:
        if self.config.history_keying == HistoryKeying.SESSION_STUDENT:
            return (session_id, student_id)
        return session_id

    def attempts_for(self, session_id: str, student_id: Optional[str] = None) -> Sequence[AttendanceClaimAttempt]:
        return self.history.all_for(self.history_key(session_id, student_id))

    def _decide(self, session: SessionDescriptor, reading: GeoReading, now: int) -> VerificationResult:
        if not self.signer.verify(session.anchor_location, session.session_id, session.integrity_hash):
            logger.warning("Integrity hash mismatch for session %s", session.session_id)
            return rejection(ReasonCode.INTEGRITY_MISMATCH)

        if now - reading.captured_at_ms > self.config.max_reading_age_ms:
            return rejection(ReasonCode.STALE_READING)

        if reading.accuracy_meters > self.config.max_accuracy_meters:
            return rejection(ReasonCode.LOW_ACCURACY)

        distance = haversine_distance_meters(reading, session.anchor_location)
        if distance <= session.tolerance_meters:
            return VerificationResult(
                accepted=True,
                reason_code=ReasonCode.ACCEPTED,
                distance_meters=distance,
                message=MESSAGES[ReasonCode.ACCEPTED],
            )

        return VerificationResult(
            accepted=False,
            reason_code=ReasonCode.OUT_OF_RANGE,
            distance_meters=distance,
            message=out_of_range_message(distance, session.tolerance_meters),
        )

    @staticmethod
    def _require_well_formed(session: Optional[SessionDescriptor], reading: Optional[GeoReading]) -> None:
        if session is None or reading is None:
            raise MalformedInputError("session and reading are required", missing=("session", "reading"))

        missing = []
        if not session.session_id:
            missing.append("sessionId")
        if session.anchor_location is None:
            missing.append("location")
        if not session.integrity_hash:
            missing.append("locationHash")
        for name in ("latitude", "longitude", "accuracy_meters", "captured_at_ms"):
            value = getattr(reading, name, None)
            if value is None or not math.isfinite(value):
                missing.append(name)
        if missing:
            raise MalformedInputError(f"missing required fields: {', '.join(missing)}", missing=tuple(missing))
