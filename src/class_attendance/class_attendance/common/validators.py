from __future__ import annotations

import math
from typing import Any, Mapping

from ..core.exceptions import MalformedInputError


def require_fields(data: Mapping[str, Any] | None, fields: tuple[str, ...], what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise MalformedInputError(f"{what} is missing", missing=fields)

    missing = tuple(f for f in fields if data.get(f) in (None, ""))
    if missing:
        raise MalformedInputError(f"{what} is missing {', '.join(missing)}", missing=missing)
    return data


def require_number(value: Any, field_name: str) -> float:
    """Finite float or MalformedInputError ("nan" and "inf" are rejected)."""
    if isinstance(value, bool) or value is None:
        raise MalformedInputError(f"{field_name} must be a number", missing=(field_name,))
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise MalformedInputError(f"{field_name} must be a number", missing=(field_name,))
    if not math.isfinite(number):
        raise MalformedInputError(f"{field_name} must be a finite number", missing=(field_name,))
    return number


def optional_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None
