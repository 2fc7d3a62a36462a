from __future__ import annotations

import math
from typing import Any

from ..core.exceptions import ValidationError


def require_finite(value: Any, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a finite number")
    return number


def require_non_negative(value: Any, field_name: str) -> float:
    number = require_finite(value, field_name)
    if number < 0:
        raise ValidationError(f"{field_name} must be a non-negative number")
    return number


def require_latitude(value: Any) -> float:
    lat = require_finite(value, "latitude")
    if not -90 <= lat <= 90:
        raise ValidationError("latitude must be between -90 and 90")
    return lat


def require_longitude(value: Any) -> float:
    lon = require_finite(value, "longitude")
    if not -180 <= lon <= 180:
        raise ValidationError("longitude must be between -180 and 180")
    return lon


def is_finite_number(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False
