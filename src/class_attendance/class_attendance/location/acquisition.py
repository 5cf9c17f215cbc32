from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Mapping, Optional, Protocol

from ..common.datetime_utils import now_ms
from ..core.constants import DEFAULT_MAX_ACCURACY_METERS
from ..core.enums import LocationErrorCode
from ..core.exceptions import LocationAcquisitionError
from .model import GeoReading

logger = logging.getLogger(__name__)

GUIDANCE: dict[LocationErrorCode, tuple[str, str]] = {
    LocationErrorCode.PERMISSION_DENIED: (
        "Failed to get location. Location access denied. Please allow location access in your browser settings.",
        "Go to your browser settings and enable location access for this site.",
    ),
    LocationErrorCode.POSITION_UNAVAILABLE: (
        "Failed to get location. Location information is unavailable. Please check your GPS settings.",
        "Make sure your device has GPS enabled and you have a clear view of the sky. "
        "Try moving to a different location or restarting your device.",
    ),
    LocationErrorCode.TIMEOUT: (
        "Failed to get location. Location request timed out. Please try again.",
        "The location request took too long. Try again in a few seconds.",
    ),
    LocationErrorCode.UNSUPPORTED: (
        "Geolocation is not supported by this browser.",
        "Use a device or browser with location services.",
    ),
    LocationErrorCode.LOW_ACCURACY: (
        "Location accuracy is too low. Please move to an area with better GPS signal.",
        "Move closer to a window or outdoors and try again.",
    ),
    LocationErrorCode.UNKNOWN: (
        "Failed to get location. An unknown error occurred. Please try again.",
        "Please check your device settings and try again.",
    ),
}


def guidance_for(code: LocationErrorCode) -> tuple[str, str]:
    """User-facing (message, detail) for an acquisition failure."""
    return GUIDANCE.get(code, GUIDANCE[LocationErrorCode.UNKNOWN])


def acquisition_error(code: LocationErrorCode) -> LocationAcquisitionError:
    message, detail = guidance_for(code)
    return LocationAcquisitionError(code, message, detail)


class LocationProvider(Protocol):
    def current_position(self) -> GeoReading:
        """Return a reading or raise LocationAcquisitionError."""
        raise NotImplementedError


class SubmittedLocationProvider:
    """Reading reported by the student's device in a request body.

    The device either sends ``location`` or, when the browser geolocation
    call failed, ``locationError`` with one of the LocationErrorCode values.
    """

    def __init__(self, body: Mapping[str, Any] | None):
        self._body = body or {}

    def current_position(self) -> GeoReading:
        error = self._body.get("locationError")
        if error:
            try:
                code = LocationErrorCode(str(error).upper())
            except ValueError:
                code = LocationErrorCode.UNKNOWN
            raise acquisition_error(code)

        location = self._body.get("location")
        if location is None:
            raise acquisition_error(LocationErrorCode.POSITION_UNAVAILABLE)
        return GeoReading.from_dict(location)


class LocationAcquirer:
    """Obtain a usable reading, substituting ``fallback_location`` when configured.

    Without a fallback every failure propagates as LocationAcquisitionError.
    """

    def __init__(
        self,
        *,
        fallback_location: Optional[GeoReading] = None,
        max_accuracy_meters: float = DEFAULT_MAX_ACCURACY_METERS,
        clock: Callable[[], int] = now_ms,
    ):
        self._fallback = fallback_location
        self._max_accuracy = float(max_accuracy_meters)
        self._clock = clock

    @property
    def fallback_location(self) -> Optional[GeoReading]:
        return self._fallback

    def acquire(self, provider: LocationProvider) -> GeoReading:
        try:
            reading = provider.current_position()
        except LocationAcquisitionError as e:
            if self._fallback is None:
                raise
            logger.warning("Location unavailable (%s), using fallback location", e.code.value)
            return self._fallback_reading()

        if reading.accuracy_meters > self._max_accuracy:
            if self._fallback is None:
                raise acquisition_error(LocationErrorCode.LOW_ACCURACY)
            logger.warning("Location accuracy %.0fm too low, using fallback location", reading.accuracy_meters)
            return self._fallback_reading()

        return reading

    def _fallback_reading(self) -> GeoReading:
        return replace(self._fallback, captured_at_ms=int(self._clock()), is_fallback=True)
