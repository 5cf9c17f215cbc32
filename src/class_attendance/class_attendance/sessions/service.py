from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_ms
from ..common.validators import require_number
from ..core.constants import DEFAULT_SESSION_MAX_AGE_MS, DEFAULT_TOLERANCE_METERS
from ..core.enums import ReasonCode
from ..core.exceptions import MalformedInputError, ValidationError
from ..integrity.strategies.base import IntegritySigner
from ..location.model import GeoReading, VerificationResult
from ..location.verifier import rejection
from .model import SessionDescriptor, clamp_tolerance
from .repository import SessionRepository

logger = logging.getLogger(__name__)


class SessionService:
    """Use case: lecturers open sessions; students' scanned payloads are checked."""

    def __init__(
        self,
        sessions: SessionRepository,
        signer: IntegritySigner,
        *,
        default_tolerance_meters: int = DEFAULT_TOLERANCE_METERS,
        max_age_ms: int = DEFAULT_SESSION_MAX_AGE_MS,
    ):
        self._sessions = sessions
        self._signer = signer
        self._tolerance = clamp_tolerance(default_tolerance_meters)
        self._max_age_ms = int(max_age_ms)

    @property
    def default_tolerance_meters(self) -> int:
        return self._tolerance

    def set_default_tolerance(self, value: float) -> int:
        """Admin setting; always clamped to 10..500 m."""
        self._tolerance = clamp_tolerance(value)
        return self._tolerance

    def create_session(
        self,
        *,
        course: str,
        scheduled_time: str,
        location: Optional[GeoReading],
        now: int | None = None,
        tolerance_meters: Optional[float] = None,
    ) -> SessionDescriptor:
        if not course or not course.strip() or not scheduled_time or location is None:
            raise ValidationError("Please fill in all fields and get your current location.")

        now = int(now if now is not None else now_ms())
        session_id = str(now)
        while self._sessions.get_by_id(session_id) is not None:
            now += 1
            session_id = str(now)

        session = SessionDescriptor(
            session_id=session_id,
            anchor_location=location,
            tolerance_meters=self._tolerance if tolerance_meters is None else require_number(tolerance_meters, "tolerance"),
            integrity_hash=self._signer.sign(location, session_id),
            created_at_ms=now,
            course=course.strip(),
            scheduled_time=scheduled_time,
        )
        self._sessions.add(session)
        logger.info("Session %s created for %r (tolerance=%sm)", session.session_id, session.course, session.tolerance_meters)
        return session

    def qr_text(self, session: SessionDescriptor) -> str:
        """The text encoded into the QR code shown to students."""
        return json.dumps(session.to_payload(), separators=(",", ":"))

    def parse_qr_payload(self, payload: str | Mapping[str, Any] | None) -> SessionDescriptor:
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except ValueError:
                raise MalformedInputError("Invalid QR code format. Please scan a valid session QR code.")
        return SessionDescriptor.from_payload(payload)

    def check_session(self, session: SessionDescriptor, now: int) -> Optional[VerificationResult]:
        """SESSION_EXPIRED result when the QR code is older than the max age, else None."""
        if now - session.created_at_ms > self._max_age_ms:
            return rejection(ReasonCode.SESSION_EXPIRED)
        return None

    def get_session(self, session_id: str) -> Optional[SessionDescriptor]:
        return self._sessions.get_by_id(session_id)

    def list_sessions(self) -> Sequence[SessionDescriptor]:
        return self._sessions.list_all()
