"""Great-circle distance between GPS coordinates (Haversine formula)."""

from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt

from ..core.constants import EARTH_RADIUS_METERS


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance in meters between two (latitude, longitude) points given in degrees.

    Non-finite inputs propagate as NaN/inf; callers reject them beforehand.
    """
    phi1, phi2 = radians(lat1), radians(lat2)
    d_phi = radians(lat2 - lat1)
    d_lambda = radians(lon2 - lon1)

    a = sin(d_phi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(d_lambda / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def is_within_radius(
    lat: float,
    lon: float,
    center_lat: float,
    center_lon: float,
    radius_m: float,
) -> bool:
    return distance_meters(lat, lon, center_lat, center_lon) <= radius_m
