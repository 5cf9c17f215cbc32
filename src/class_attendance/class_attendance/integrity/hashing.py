"""Integrity digests binding a session's anchor location to its id.

``compute_integrity_hash`` is a 32-bit rolling checksum, kept for
compatibility with QR codes issued by the browser client. It detects
accidental or naive edits of the payload only: anyone who knows the secret
(or brute-forces 32 bits) can forge it. ``compute_integrity_mac`` is the
keyed HMAC-SHA256 over the same fields and should be preferred.
"""

from __future__ import annotations

import hashlib
import hmac
import math

from ..location.model import GeoReading


def format_coordinate(value: float) -> str:
    """Shortest round-trip decimal, integral values without ``.0``."""
    value = float(value)
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def signed_message(location: GeoReading, session_id: str, secret: str) -> str:
    return f"{format_coordinate(location.latitude)},{format_coordinate(location.longitude)},{session_id},{secret}"


def compute_integrity_hash(location: GeoReading, session_id: str, secret: str) -> str:
    data = signed_message(location, session_id, secret)
    units = data.encode("utf-16-le")

    h = 0
    for i in range(0, len(units), 2):
        unit = units[i] | (units[i + 1] << 8)
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return format(abs(h), "x")


def compute_integrity_mac(location: GeoReading, session_id: str, secret: str) -> str:
    message = f"{format_coordinate(location.latitude)},{format_coordinate(location.longitude)},{session_id}"
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()
