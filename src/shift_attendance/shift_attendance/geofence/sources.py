from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..core.enums import LocationSource
from ..geo.location import build_geofence_snapshot, build_location_label
from ..geo.model import GeofenceSnapshot, LocationDetails
from .lookup import LocationLookup


@dataclass(frozen=True)
class ResolutionRequest:
    """What the resolver knows about the shift being evaluated."""

    worker_id: int
    job_id: Optional[int] = None
    business_id: Optional[int] = None
    cached: Optional[GeofenceSnapshot] = None
    explicit: Optional[LocationDetails] = None


@dataclass(frozen=True)
class Resolved:
    source: LocationSource
    snapshot: GeofenceSnapshot
    label: Optional[str] = None


class GeofenceSource(ABC):
    """Strategy Pattern: one place a shift's geofence may come from."""

    source: LocationSource

    @abstractmethod
    def locate(self, request: ResolutionRequest, lookup: LocationLookup) -> Optional[Resolved]:
        raise NotImplementedError

    def _from_details(self, details: Optional[LocationDetails]) -> Optional[Resolved]:
        snapshot = build_geofence_snapshot(details, self.source)
        if snapshot is None:
            return None
        return Resolved(source=self.source, snapshot=snapshot, label=build_location_label(details))


class ExplicitGeofenceSource(GeofenceSource):
    """Snapshot already on the shift, else a geofence handed in by the caller."""

    source = LocationSource.EXPLICIT

    def locate(self, request: ResolutionRequest, lookup: LocationLookup) -> Optional[Resolved]:
        if request.cached is not None:
            cached = request.cached
            return Resolved(source=cached.source, snapshot=cached, label=cached.address or cached.label)
        return self._from_details(request.explicit)


class EmploymentGeofenceSource(GeofenceSource):
    """Work-location override on the worker's active employment for the job."""

    source = LocationSource.EMPLOYMENT

    def locate(self, request: ResolutionRequest, lookup: LocationLookup) -> Optional[Resolved]:
        if request.job_id is None:
            return None
        return self._from_details(lookup.get_employment_location(worker_id=request.worker_id, job_id=request.job_id))


class JobGeofenceSource(GeofenceSource):
    source = LocationSource.JOB

    def locate(self, request: ResolutionRequest, lookup: LocationLookup) -> Optional[Resolved]:
        if request.job_id is None:
            return None
        return self._from_details(lookup.get_job_location(request.job_id))


class BusinessGeofenceSource(GeofenceSource):
    """Owning business: the shift's business, else the job's."""

    source = LocationSource.BUSINESS

    def locate(self, request: ResolutionRequest, lookup: LocationLookup) -> Optional[Resolved]:
        business_id = request.business_id
        if business_id is None and request.job_id is not None:
            business_id = lookup.get_job_business_id(request.job_id)
        if business_id is None:
            return None
        return self._from_details(lookup.get_business_location(business_id))
