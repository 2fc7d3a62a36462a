from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import ensure_utc
from ..common.validators import is_finite_number
from ..core.enums import LocationSource


@dataclass(frozen=True)
class LocationDetails:
    """A configured place on an upstream record (employment, job or business)."""

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    allowed_radius: Optional[float] = None
    is_active: bool = True
    label: Optional[str] = None
    formatted_address: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None

    @property
    def has_coordinates(self) -> bool:
        return is_finite_number(self.latitude) and is_finite_number(self.longitude)


@dataclass(frozen=True)
class GeofenceSnapshot:
    """Geofence copied onto a shift the first time it is needed.

    Once attached to a shift it is never replaced, so later edits of the
    business/job/employment location do not change already evaluated shifts.
    """

    latitude: float
    longitude: float
    allowed_radius: float
    is_active: bool = True
    label: Optional[str] = None
    address: Optional[str] = None
    source: LocationSource = LocationSource.EXPLICIT

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["source"] = self.source.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GeofenceSnapshot":
        return cls(
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            allowed_radius=float(data["allowed_radius"]),
            is_active=bool(data.get("is_active", True)),
            label=data.get("label"),
            address=data.get("address"),
            source=LocationSource(data.get("source") or LocationSource.EXPLICIT.value),
        )


@dataclass(frozen=True)
class GpsReading:
    """Position reported by the worker's device at clock-in/clock-out."""

    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    altitude: Optional[float] = None
    heading: Optional[float] = None
    speed: Optional[float] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class LocationFix:
    """Recorded evidence: the reading plus the geofence verdict."""

    latitude: float
    longitude: float
    captured_at: datetime
    distance_meters: float
    is_valid: bool
    message: str
    accuracy: Optional[float] = None
    altitude: Optional[float] = None
    heading: Optional[float] = None
    speed: Optional[float] = None
    address: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["captured_at"] = self.captured_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LocationFix":
        return cls(
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            captured_at=ensure_utc(datetime.fromisoformat(data["captured_at"])),
            distance_meters=float(data["distance_meters"]),
            is_valid=bool(data["is_valid"]),
            message=str(data.get("message") or ""),
            accuracy=data.get("accuracy"),
            altitude=data.get("altitude"),
            heading=data.get("heading"),
            speed=data.get("speed"),
            address=data.get("address"),
        )
