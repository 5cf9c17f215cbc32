from __future__ import annotations

import time
from datetime import datetime, timezone


def now_ms() -> int:
    """Current epoch time in milliseconds.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return int(time.time() * 1000)


def ms_to_iso(value_ms: int) -> str:
    """Epoch milliseconds to an ISO-8601 UTC string ("2025-01-01T08:00:00.000Z")."""
    dt = datetime.fromtimestamp(value_ms / 1000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value_ms % 1000:03d}Z"
