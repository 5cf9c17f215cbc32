from __future__ import annotations

import math

from ..core.constants import EARTH_RADIUS_METERS
from .model import GeoReading


def haversine_distance_meters(a: GeoReading, b: GeoReading) -> float:
    """Great-circle distance between two readings in meters.

    No input validation: NaN in, NaN out.
    """
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    dphi = math.radians(b.latitude - a.latitude)
    dlambda = math.radians(b.longitude - a.longitude)

    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c
