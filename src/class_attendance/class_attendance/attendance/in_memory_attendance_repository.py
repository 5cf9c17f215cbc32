from __future__ import annotations

import threading
from typing import Optional, Sequence

from ..location.model import GeoReading
from .model import AttendanceRecord


class InMemoryAttendanceRepository:
    """Append-only attendance list kept for the process lifetime."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: list[AttendanceRecord] = []

    def create(
        self,
        *,
        student_id: str,
        session_id: str,
        course: str,
        timestamp: str,
        location: GeoReading,
        distance_meters: Optional[float] = None,
    ) -> AttendanceRecord:
        with self._lock:
            next_id = max((r.attendance_id for r in self._records), default=0) + 1
            record = AttendanceRecord(
                attendance_id=next_id,
                student_id=str(student_id),
                session_id=str(session_id),
                course=course,
                timestamp=timestamp,
                location=location,
                validated=True,
                distance_meters=distance_meters,
            )
            self._records.append(record)
        return record

    def list_all(self) -> Sequence[AttendanceRecord]:
        with self._lock:
            return list(self._records)

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        with self._lock:
            return [r for r in self._records if r.session_id == str(session_id)]
