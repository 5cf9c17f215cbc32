from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.validators import optional_number, require_fields, require_number
from ..core.enums import ReasonCode
from ..core.exceptions import MalformedInputError


@dataclass(frozen=True)
class GeoReading:
    """A point-in-time device location (WGS-84 degrees, epoch milliseconds)."""

    latitude: float
    longitude: float
    accuracy_meters: float
    captured_at_ms: int
    altitude: Optional[float] = None
    heading_degrees: Optional[float] = None
    speed_meters_per_sec: Optional[float] = None
    is_fallback: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None, *, what: str = "location") -> "GeoReading":
        """Build from the wire shape used in QR payloads and API bodies."""

        data = require_fields(data, ("latitude", "longitude", "accuracy", "timestamp"), what)
        accuracy = require_number(data["accuracy"], "accuracy")
        if accuracy < 0:
            raise MalformedInputError(f"{what} accuracy must not be negative", missing=("accuracy",))

        return cls(
            latitude=require_number(data["latitude"], "latitude"),
            longitude=require_number(data["longitude"], "longitude"),
            accuracy_meters=accuracy,
            captured_at_ms=int(require_number(data["timestamp"], "timestamp")),
            altitude=optional_number(data.get("altitude")),
            heading_degrees=optional_number(data.get("heading")),
            speed_meters_per_sec=optional_number(data.get("speed")),
            is_fallback=bool(data.get("isFallback", False)),
        )

    def to_dict(self) -> dict:
        out = {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "accuracy": self.accuracy_meters,
            "timestamp": self.captured_at_ms,
            "altitude": self.altitude,
            "heading": self.heading_degrees,
            "speed": self.speed_meters_per_sec,
        }
        if self.is_fallback:
            out["isFallback"] = True
        return out


@dataclass(frozen=True)
class AttendanceClaimAttempt:
    """One evaluation of a claim, kept in the bounded attempt history."""

    session_id: str
    student_reading: GeoReading
    was_accepted: bool
    evaluated_at_ms: int
    student_id: Optional[str] = None


@dataclass(frozen=True)
class VerificationResult:
    accepted: bool
    reason_code: ReasonCode
    distance_meters: Optional[float] = None
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "accepted": self.accepted,
            "reasonCode": self.reason_code.value,
            "distanceMeters": None if self.distance_meters is None else round(self.distance_meters, 1),
            "message": self.message,
        }
