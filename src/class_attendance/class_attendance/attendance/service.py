from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import ms_to_iso, now_ms
from ..core.enums import ReasonCode
from ..core.exceptions import MalformedInputError, ValidationError
from ..location.model import GeoReading, VerificationResult
from ..location.verifier import LocationVerifier, rejection
from ..sessions.service import SessionService
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClaimOutcome:
    result: VerificationResult
    record: Optional[AttendanceRecord] = None

    def to_dict(self) -> dict:
        out = self.result.to_dict()
        out["attendance"] = self.record.to_dict() if self.record else None
        return out


class AttendanceService:
    """Use case: a student claims attendance by submitting a scanned QR payload.

    Pipeline: parse payload -> stored session lookup -> session age ->
    location verification -> persist on acceptance. Tolerance and creation
    time always come from the stored session, not the scanned payload; an
    unknown session id is treated as expired. Rejections are returned,
    never raised; only a missing student id raises ValidationError.
    """

    def __init__(self, attendance: AttendanceRepository, sessions: SessionService, verifier: LocationVerifier):
        self._attendance = attendance
        self._sessions = sessions
        self._verifier = verifier

    def submit_claim(
        self,
        *,
        student_id: str,
        payload: str | Mapping[str, Any] | None,
        reading: Optional[GeoReading],
        now: int | None = None,
    ) -> ClaimOutcome:
        if student_id is None or not str(student_id).strip():
            raise ValidationError("studentId is required")
        student_id = str(student_id).strip()
        now = int(now if now is not None else now_ms())

        try:
            session = self._sessions.parse_qr_payload(payload)
        except MalformedInputError as e:
            logger.info("Claim by %s rejected: %s", student_id, e)
            return ClaimOutcome(rejection(ReasonCode.MISSING_FIELDS))

        stored = self._sessions.get_session(session.session_id)
        if stored is None:
            logger.info("Claim by %s rejected: unknown session %s", student_id, session.session_id)
            return ClaimOutcome(rejection(ReasonCode.SESSION_EXPIRED))
        # tolerance and creation time are unsigned in the payload
        session = replace(session, tolerance_meters=stored.tolerance_meters, created_at_ms=stored.created_at_ms)

        expired = self._sessions.check_session(session, now)
        if expired:
            logger.info("Claim by %s rejected: session %s expired", student_id, session.session_id)
            return ClaimOutcome(expired)

        try:
            result = self._verifier.evaluate(session, reading, now, student_id=student_id)
        except MalformedInputError as e:
            logger.info("Claim by %s rejected: %s", student_id, e)
            return ClaimOutcome(rejection(ReasonCode.MISSING_FIELDS))

        if not result.accepted:
            return ClaimOutcome(result)

        record = self._attendance.create(
            student_id=student_id,
            session_id=session.session_id,
            course=session.course,
            timestamp=ms_to_iso(now),
            location=reading,
            distance_meters=result.distance_meters,
        )
        logger.info("Attendance %s recorded for %s in session %s", record.attendance_id, student_id, session.session_id)
        return ClaimOutcome(result, record)

    def list_records(self, *, session_id: str | None = None) -> Sequence[AttendanceRecord]:
        if session_id:
            return self._attendance.list_for_session(session_id)
        return self._attendance.list_all()
