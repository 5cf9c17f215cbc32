"""Example: use the service layer directly (no Flask).

A lecturer opens a session, a student claims attendance twice: once from the
classroom and once from across campus.
"""

import importlib
import math

from config import get_settings_module

from src.class_attendance.class_attendance.common.datetime_utils import now_ms
from src.class_attendance.class_attendance.container import build_container
from src.class_attendance.class_attendance.location.model import GeoReading


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings=settings)

    now = now_ms()
    classroom = GeoReading(latitude=10.762622, longitude=106.660172, accuracy_meters=8, captured_at_ms=now)
    session = container.session_service.create_session(course="CS101", scheduled_time="08:00", location=classroom, now=now)
    qr_text = container.session_service.qr_text(session)
    print("QR:", qr_text)

    across_campus = GeoReading(
        latitude=classroom.latitude + math.degrees(300 / 6_371_000),
        longitude=classroom.longitude,
        accuracy_meters=6,
        captured_at_ms=now,
    )
    for reading in (classroom, across_campus):
        outcome = container.attendance_service.submit_claim(student_id="2", payload=qr_text, reading=reading, now=now)
        print(outcome.to_dict())


if __name__ == "__main__":
    main()
