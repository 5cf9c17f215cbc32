from __future__ import annotations

import math
from dataclasses import replace

import pytest

from src.class_attendance.class_attendance.attendance.in_memory_attendance_repository import InMemoryAttendanceRepository
from src.class_attendance.class_attendance.attendance.service import AttendanceService
from src.class_attendance.class_attendance.core.enums import ReasonCode
from src.class_attendance.class_attendance.core.exceptions import ValidationError
from src.class_attendance.class_attendance.integrity.strategies.checksum_strategy import ChecksumSigner
from src.class_attendance.class_attendance.location.model import GeoReading
from src.class_attendance.class_attendance.location.verifier import LocationVerifier
from src.class_attendance.class_attendance.sessions.in_memory_session_repository import InMemorySessionRepository
from src.class_attendance.class_attendance.sessions.service import SessionService

NOW = 1_767_225_600_000
ANCHOR = GeoReading(latitude=10.762622, longitude=106.660172, accuracy_meters=8, captured_at_ms=NOW - 60_000)


def _build():
    signer = ChecksumSigner("attendance-secret")
    sessions = SessionService(InMemorySessionRepository(), signer)
    attendance_repo = InMemoryAttendanceRepository()
    svc = AttendanceService(attendance_repo, sessions, LocationVerifier(signer=signer))
    session = sessions.create_session(course="CS101", scheduled_time="08:00", location=ANCHOR, now=NOW - 60_000)
    return svc, attendance_repo, sessions, session


def _north(meters: float, *, at: int = NOW) -> GeoReading:
    return GeoReading(
        latitude=ANCHOR.latitude + math.degrees(meters / 6_371_000),
        longitude=ANCHOR.longitude,
        accuracy_meters=6,
        captured_at_ms=at,
    )


def test_accepted_claim_is_persisted():
    svc, repo, sessions, session = _build()

    outcome = svc.submit_claim(student_id="2", payload=sessions.qr_text(session), reading=_north(10), now=NOW)

    assert outcome.result.accepted is True
    assert outcome.record is not None
    assert outcome.record.attendance_id == 1
    assert outcome.record.student_id == "2"
    assert outcome.record.session_id == session.session_id
    assert outcome.record.course == "CS101"
    assert outcome.record.validated is True
    assert outcome.record.timestamp == "2026-01-01T00:00:00.000Z"
    assert repo.list_all() == [outcome.record]


def test_record_ids_increase():
    svc, _, sessions, session = _build()

    first = svc.submit_claim(student_id="2", payload=session.to_payload(), reading=_north(5), now=NOW)
    second = svc.submit_claim(student_id="3", payload=session.to_payload(), reading=_north(6, at=NOW + 1), now=NOW + 1)

    assert [first.record.attendance_id, second.record.attendance_id] == [1, 2]
    assert len(svc.list_records(session_id=session.session_id)) == 2
    assert svc.list_records(session_id="other") == []


def test_out_of_range_claim_is_not_persisted():
    svc, repo, sessions, session = _build()

    outcome = svc.submit_claim(student_id="2", payload=session.to_payload(), reading=_north(60), now=NOW)

    assert outcome.result.reason_code == ReasonCode.OUT_OF_RANGE
    assert outcome.result.distance_meters == pytest.approx(60.0, rel=1e-6)
    assert outcome.record is None
    assert repo.list_all() == []
    body = outcome.to_dict()
    assert body["reasonCode"] == "OUT_OF_RANGE"
    assert body["distanceMeters"] == 60.0
    assert body["attendance"] is None


def test_expired_session_is_rejected_before_location_check():
    svc, repo, sessions, session = _build()
    later = session.created_at_ms + 2 * 60 * 60 * 1000 + 1

    outcome = svc.submit_claim(student_id="2", payload=session.to_payload(), reading=_north(0, at=later), now=later)

    assert outcome.result.reason_code == ReasonCode.SESSION_EXPIRED
    assert repo.list_all() == []


def test_malformed_payload_or_reading_is_missing_fields():
    svc, repo, sessions, session = _build()

    bad_payload = svc.submit_claim(student_id="2", payload="{not json", reading=_north(0), now=NOW)
    no_location = session.to_payload()
    del no_location["location"]
    missing = svc.submit_claim(student_id="2", payload=no_location, reading=_north(0), now=NOW)
    no_reading = svc.submit_claim(student_id="2", payload=session.to_payload(), reading=None, now=NOW)

    for outcome in (bad_payload, missing, no_reading):
        assert outcome.result.reason_code == ReasonCode.MISSING_FIELDS
        assert outcome.result.accepted is False
    assert repo.list_all() == []


def test_tampered_payload_is_integrity_mismatch():
    svc, repo, sessions, session = _build()
    payload = session.to_payload()
    payload["location"] = dict(payload["location"], latitude=payload["location"]["latitude"] + 0.01)

    outcome = svc.submit_claim(student_id="2", payload=payload, reading=_north(1_100), now=NOW)

    assert outcome.result.reason_code == ReasonCode.INTEGRITY_MISMATCH
    assert repo.list_all() == []


def test_student_id_is_required():
    svc, _, sessions, session = _build()

    with pytest.raises(ValidationError):
        svc.submit_claim(student_id="  ", payload=session.to_payload(), reading=_north(0), now=NOW)


def test_stale_reading_is_not_persisted():
    svc, repo, sessions, session = _build()
    reading = replace(_north(0), captured_at_ms=NOW - 6 * 60 * 1000)

    outcome = svc.submit_claim(student_id="2", payload=session.to_payload(), reading=reading, now=NOW)

    assert outcome.result.reason_code == ReasonCode.STALE_READING
    assert repo.list_all() == []


def test_payload_tolerance_is_ignored_in_favour_of_stored_session():
    svc, repo, sessions, session = _build()
    payload = dict(session.to_payload(), tolerance=500)

    outcome = svc.submit_claim(student_id="2", payload=payload, reading=_north(400), now=NOW)

    assert outcome.result.reason_code == ReasonCode.OUT_OF_RANGE
    assert "within 50m" in outcome.result.message
    assert outcome.record is None
    assert repo.list_all() == []


def test_payload_timestamp_cannot_extend_session_lifetime():
    svc, repo, sessions, session = _build()
    five_hours = 5 * 60 * 60 * 1000
    payload = dict(session.to_payload(), timestamp=NOW + five_hours)
    later = NOW + five_hours

    outcome = svc.submit_claim(student_id="2", payload=payload, reading=_north(0, at=later), now=later)

    assert outcome.result.reason_code == ReasonCode.SESSION_EXPIRED
    assert repo.list_all() == []


def test_unknown_session_is_treated_as_expired():
    svc, repo, sessions, session = _build()
    other = SessionService(InMemorySessionRepository(), ChecksumSigner("attendance-secret"))
    foreign = other.create_session(course="CS101", scheduled_time="08:00", location=ANCHOR, now=NOW - 30_000)

    outcome = svc.submit_claim(student_id="2", payload=foreign.to_payload(), reading=_north(0), now=NOW)

    assert outcome.result.reason_code == ReasonCode.SESSION_EXPIRED
    assert outcome.record is None


@pytest.mark.parametrize("value", ["nan", "inf", "-inf", float("nan")])
def test_non_finite_payload_numbers_are_missing_fields(value):
    svc, repo, sessions, session = _build()
    tolerance = dict(session.to_payload(), tolerance=value)
    latitude = session.to_payload()
    latitude["location"] = dict(latitude["location"], latitude=value)

    for payload in (tolerance, latitude):
        outcome = svc.submit_claim(student_id="2", payload=payload, reading=_north(0), now=NOW)
        assert outcome.result.reason_code == ReasonCode.MISSING_FIELDS
    assert repo.list_all() == []


@pytest.mark.parametrize("field", ["latitude", "longitude", "accuracy_meters"])
def test_non_finite_reading_is_missing_fields(field):
    svc, repo, sessions, session = _build()
    reading = replace(_north(0), **{field: float("inf")})

    outcome = svc.submit_claim(student_id="2", payload=session.to_payload(), reading=reading, now=NOW)

    assert outcome.result.reason_code == ReasonCode.MISSING_FIELDS
    assert repo.list_all() == []
