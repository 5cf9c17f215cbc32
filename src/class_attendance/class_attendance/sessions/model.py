from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.validators import require_fields, require_number
from ..core.constants import DEFAULT_TOLERANCE_METERS, MAX_TOLERANCE_METERS, MIN_TOLERANCE_METERS
from ..location.model import GeoReading

PAYLOAD_FIELDS = ("course", "location", "sessionId", "locationHash", "timestamp")


def clamp_tolerance(value: Optional[float]) -> int:
    if value is None:
        return DEFAULT_TOLERANCE_METERS
    return int(max(MIN_TOLERANCE_METERS, min(MAX_TOLERANCE_METERS, round(require_number(value, "tolerance")))))


@dataclass(frozen=True)
class SessionDescriptor:
    """Domain entity: a lecturer-declared class session as carried by the QR code."""

    session_id: str
    anchor_location: GeoReading
    tolerance_meters: int
    integrity_hash: str
    created_at_ms: int
    course: str = ""
    scheduled_time: str = ""

    def __post_init__(self):
        object.__setattr__(self, "tolerance_meters", clamp_tolerance(self.tolerance_meters))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> "SessionDescriptor":
        """Parse a scanned QR payload (already JSON-decoded)."""

        payload = require_fields(payload, PAYLOAD_FIELDS, "session payload")
        tolerance = payload.get("tolerance")
        return cls(
            session_id=str(payload["sessionId"]),
            anchor_location=GeoReading.from_dict(payload["location"], what="session location"),
            tolerance_meters=None if tolerance is None else require_number(tolerance, "tolerance"),
            integrity_hash=str(payload["locationHash"]),
            created_at_ms=int(require_number(payload["timestamp"], "timestamp")),
            course=str(payload["course"]),
            scheduled_time=str(payload.get("time") or ""),
        )

    def to_payload(self) -> dict:
        return {
            "course": self.course,
            "time": self.scheduled_time,
            "location": self.anchor_location.to_dict(),
            "sessionId": self.session_id,
            "locationHash": self.integrity_hash,
            "tolerance": self.tolerance_meters,
            "timestamp": self.created_at_ms,
        }
