from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..location.model import GeoReading


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: a validated attendance for one student in one session."""

    attendance_id: int
    student_id: str
    session_id: str
    course: str
    timestamp: str
    location: GeoReading
    validated: bool = True
    distance_meters: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "studentId": self.student_id,
            "sessionId": self.session_id,
            "course": self.course,
            "timestamp": self.timestamp,
            "location": self.location.to_dict(),
            "validated": self.validated,
            "distance": None if self.distance_meters is None else round(self.distance_meters),
        }
