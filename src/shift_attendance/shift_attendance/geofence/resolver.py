from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from ..core.enums import LocationSource
from ..geo.model import LocationDetails
from ..shifts.model import ShiftRecord
from .lookup import LocationLookup
from .sources import (
    BusinessGeofenceSource,
    EmploymentGeofenceSource,
    ExplicitGeofenceSource,
    GeofenceSource,
    JobGeofenceSource,
    Resolved,
    ResolutionRequest,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Unresolved:
    tried: tuple[LocationSource, ...]


Resolution = Union[Resolved, Unresolved]


def default_sources() -> list[GeofenceSource]:
    return [
        ExplicitGeofenceSource(),
        EmploymentGeofenceSource(),
        JobGeofenceSource(),
        BusinessGeofenceSource(),
    ]


class _MemoizedLookup(LocationLookup):
    """Caches upstream reads for one resolution so every source sees the same snapshot."""

    def __init__(self, inner: LocationLookup):
        self._inner = inner
        self._cache: dict[tuple, Any] = {}

    def _get(self, key: tuple, fn, *args, **kwargs):
        if key not in self._cache:
            self._cache[key] = fn(*args, **kwargs)
        return self._cache[key]

    def get_employment_location(self, *, worker_id: int, job_id: int) -> Optional[LocationDetails]:
        return self._get(
            ("employment", worker_id, job_id),
            self._inner.get_employment_location,
            worker_id=worker_id,
            job_id=job_id,
        )

    def get_job_location(self, job_id: int) -> Optional[LocationDetails]:
        return self._get(("job", job_id), self._inner.get_job_location, job_id)

    def get_job_business_id(self, job_id: int) -> Optional[int]:
        return self._get(("job_business", job_id), self._inner.get_job_business_id, job_id)

    def get_business_location(self, business_id: int) -> Optional[LocationDetails]:
        return self._get(("business", business_id), self._inner.get_business_location, business_id)


class GeofenceResolver:
    """Picks the authoritative geofence for a shift: first usable source wins.

    Order: explicit (cached snapshot or caller-supplied) -> worker employment
    override -> job location -> business location.
    """

    def __init__(self, lookup: LocationLookup, *, sources: Optional[Sequence[GeofenceSource]] = None):
        self._lookup = lookup
        self._sources = list(sources) if sources is not None else default_sources()

    def resolve(self, request: ResolutionRequest) -> Resolution:
        lookup = _MemoizedLookup(self._lookup)
        tried: list[LocationSource] = []
        for source in self._sources:
            tried.append(source.source)
            found = source.locate(request, lookup)
            if found is not None:
                logger.debug("Geofence for worker=%s job=%s resolved from %s", request.worker_id, request.job_id, found.source.value)
                return found
        return Unresolved(tried=tuple(tried))

    def resolve_for_shift(self, shift: ShiftRecord, *, explicit: Optional[LocationDetails] = None) -> Resolution:
        return self.resolve(
            ResolutionRequest(
                worker_id=shift.worker_id,
                job_id=shift.job_id,
                business_id=shift.business_id,
                cached=shift.job_location,
                explicit=explicit,
            )
        )
