from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..location.model import GeoReading
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
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
        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
