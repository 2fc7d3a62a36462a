"""Radius policy and labels shared by every place a geofence is built."""

from __future__ import annotations

import re
from typing import Any, Optional

from ..common.validators import is_finite_number
from ..core.constants import (
    DEFAULT_ALLOWED_RADIUS_METERS,
    MAX_ALLOWED_RADIUS_METERS,
    MIN_ALLOWED_RADIUS_METERS,
)
from ..core.enums import LocationSource
from .model import GeofenceSnapshot, LocationDetails


def clamp_radius(value: Any) -> float:
    """Allowed radius in meters: default when missing, clamped to [10, 5000]."""
    if not is_finite_number(value):
        return float(DEFAULT_ALLOWED_RADIUS_METERS)
    return float(min(max(float(value), MIN_ALLOWED_RADIUS_METERS), MAX_ALLOWED_RADIUS_METERS))


def build_location_label(details: Optional[LocationDetails]) -> Optional[str]:
    if details is None:
        return None
    if details.formatted_address and details.formatted_address.strip():
        return details.formatted_address.strip()

    parts = [details.label, details.address, details.city, details.state, details.postal_code]
    collected = [p.strip() for p in parts if p and p.strip()]
    if not collected:
        return None
    return re.sub(r",\s*,", ", ", ", ".join(collected)).strip() or None


def build_geofence_snapshot(details: Optional[LocationDetails], source: LocationSource) -> Optional[GeofenceSnapshot]:
    if details is None or not details.has_coordinates:
        return None

    return GeofenceSnapshot(
        latitude=float(details.latitude),
        longitude=float(details.longitude),
        allowed_radius=clamp_radius(details.allowed_radius),
        is_active=bool(details.is_active),
        label=details.label,
        address=build_location_label(details),
        source=source,
    )
