import json

import pytest

from src.class_attendance.class_attendance.core.enums import ReasonCode
from src.class_attendance.class_attendance.core.exceptions import MalformedInputError, ValidationError
from src.class_attendance.class_attendance.integrity.strategies.checksum_strategy import ChecksumSigner
from src.class_attendance.class_attendance.location.model import GeoReading
from src.class_attendance.class_attendance.sessions.in_memory_session_repository import InMemorySessionRepository
from src.class_attendance.class_attendance.sessions.service import SessionService

NOW = 1_767_225_600_000
TWO_HOURS = 2 * 60 * 60 * 1000
LOCATION = GeoReading(latitude=10.762622, longitude=106.660172, accuracy_meters=8, captured_at_ms=NOW - 1_000)


def _service(**kwargs) -> SessionService:
    return SessionService(InMemorySessionRepository(), ChecksumSigner("attendance-secret"), **kwargs)


def test_create_session_uses_creation_time_as_id_and_signs_anchor():
    svc = _service()
    session = svc.create_session(course="CS101", scheduled_time="2026-01-01T08:00", location=LOCATION, now=NOW)

    assert session.session_id == str(NOW)
    assert session.created_at_ms == NOW
    assert session.tolerance_meters == 50
    assert ChecksumSigner("attendance-secret").verify(LOCATION, session.session_id, session.integrity_hash)
    assert svc.get_session(str(NOW)) == session


def test_session_ids_stay_unique_within_the_same_millisecond():
    svc = _service()
    a = svc.create_session(course="CS101", scheduled_time="08:00", location=LOCATION, now=NOW)
    b = svc.create_session(course="CS102", scheduled_time="09:00", location=LOCATION, now=NOW)

    assert a.session_id != b.session_id
    assert len(svc.list_sessions()) == 2


def test_tolerance_is_clamped():
    svc = _service()

    low = svc.create_session(course="A", scheduled_time="t", location=LOCATION, now=NOW, tolerance_meters=5)
    high = svc.create_session(course="B", scheduled_time="t", location=LOCATION, now=NOW + 1, tolerance_meters=900)

    assert low.tolerance_meters == 10
    assert high.tolerance_meters == 500
    assert svc.set_default_tolerance(1) == 10
    assert svc.set_default_tolerance(120) == 120
    assert _service(default_tolerance_meters=10_000).default_tolerance_meters == 500


def test_create_session_requires_all_fields():
    svc = _service()

    with pytest.raises(ValidationError):
        svc.create_session(course=" ", scheduled_time="08:00", location=LOCATION, now=NOW)
    with pytest.raises(ValidationError):
        svc.create_session(course="CS101", scheduled_time="08:00", location=None, now=NOW)


def test_qr_text_parses_back_to_the_same_session():
    svc = _service()
    session = svc.create_session(course="CS101", scheduled_time="08:00", location=LOCATION, now=NOW)

    text = svc.qr_text(session)
    payload = json.loads(text)

    assert payload["sessionId"] == str(NOW)
    assert payload["locationHash"] == session.integrity_hash
    assert payload["tolerance"] == 50
    assert svc.parse_qr_payload(text) == session


def test_parse_rejects_garbage_and_missing_fields():
    svc = _service()

    with pytest.raises(MalformedInputError):
        svc.parse_qr_payload("not json")
    with pytest.raises(MalformedInputError):
        svc.parse_qr_payload(None)
    with pytest.raises(MalformedInputError) as exc:
        svc.parse_qr_payload({"course": "CS101", "timestamp": NOW})
    assert "sessionId" in exc.value.missing


def test_payload_without_tolerance_gets_default():
    svc = _service()
    session = svc.create_session(course="CS101", scheduled_time="08:00", location=LOCATION, now=NOW)
    payload = session.to_payload()
    del payload["tolerance"]

    assert svc.parse_qr_payload(payload).tolerance_meters == 50


def test_check_session_expires_after_two_hours():
    svc = _service()
    session = svc.create_session(course="CS101", scheduled_time="08:00", location=LOCATION, now=NOW)

    assert svc.check_session(session, NOW + TWO_HOURS) is None

    expired = svc.check_session(session, NOW + TWO_HOURS + 1)
    assert expired.accepted is False
    assert expired.reason_code == ReasonCode.SESSION_EXPIRED
    assert expired.distance_meters is None


@pytest.mark.parametrize("value", ["nan", "inf", "-inf", float("nan")])
def test_non_finite_tolerance_is_rejected(value):
    svc = _service()

    with pytest.raises(MalformedInputError):
        svc.create_session(course="A", scheduled_time="t", location=LOCATION, now=NOW, tolerance_meters=value)
    with pytest.raises(MalformedInputError):
        svc.set_default_tolerance(value)
    assert svc.default_tolerance_meters == 50
    assert svc.list_sessions() == []
