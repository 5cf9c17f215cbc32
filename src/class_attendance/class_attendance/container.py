from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.in_memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_INTEGRITY_SECRET, DEFAULT_SESSION_MAX_AGE_MS, DEFAULT_TOLERANCE_METERS
from .integrity.factory import IntegritySignerFactory
from .integrity.strategies.base import IntegritySigner
from .location.acquisition import LocationAcquirer
from .location.history import AttemptHistoryStore
from .location.model import GeoReading
from .location.verifier import LocationVerifier, VerifierConfig
from .sessions.in_memory_session_repository import InMemorySessionRepository
from .sessions.service import SessionService


@dataclass(frozen=True)
class Container:
    sessions_repo: InMemorySessionRepository
    attendance_repo: InMemoryAttendanceRepository
    attempt_history: AttemptHistoryStore

    signer: IntegritySigner
    verifier: LocationVerifier
    location_acquirer: LocationAcquirer
    session_service: SessionService
    attendance_service: AttendanceService


def _fallback_location(value) -> Optional[GeoReading]:
    if not value:
        return None
    data = dict(value)
    data.setdefault("accuracy", 10)
    data.setdefault("timestamp", 0)
    return GeoReading.from_dict(data, what="fallback location")


def build_container(*, settings) -> Container:
    """Wire repositories and services from a settings module (see config/)."""

    signer = IntegritySignerFactory().for_algorithm(
        getattr(settings, "INTEGRITY_ALGORITHM", "checksum"),
        getattr(settings, "INTEGRITY_SECRET", DEFAULT_INTEGRITY_SECRET),
    )
    verifier_config = VerifierConfig.from_settings(settings)

    sessions_repo = InMemorySessionRepository()
    attendance_repo = InMemoryAttendanceRepository()
    attempt_history = AttemptHistoryStore()

    verifier = LocationVerifier(signer=signer, config=verifier_config, history=attempt_history)
    location_acquirer = LocationAcquirer(
        fallback_location=_fallback_location(getattr(settings, "FALLBACK_LOCATION", None)),
        max_accuracy_meters=verifier_config.max_accuracy_meters,
    )
    session_service = SessionService(
        sessions_repo,
        signer,
        default_tolerance_meters=int(getattr(settings, "DEFAULT_TOLERANCE_METERS", DEFAULT_TOLERANCE_METERS)),
        max_age_ms=int(getattr(settings, "SESSION_MAX_AGE_MS", DEFAULT_SESSION_MAX_AGE_MS)),
    )
    attendance_service = AttendanceService(attendance_repo, session_service, verifier)

    return Container(
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        attempt_history=attempt_history,
        signer=signer,
        verifier=verifier,
        location_acquirer=location_acquirer,
        session_service=session_service,
        attendance_service=attendance_service,
    )
