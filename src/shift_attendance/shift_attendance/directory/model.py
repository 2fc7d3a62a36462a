from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import EmploymentStatus
from ..geo.model import LocationDetails


@dataclass(frozen=True)
class Worker:
    worker_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

    @property
    def display_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        if parts:
            return " ".join(parts)
        return self.email or "Unknown Worker"


@dataclass(frozen=True)
class Business:
    business_id: int
    name: str
    owner_id: Optional[int] = None
    location: Optional[LocationDetails] = None


@dataclass(frozen=True)
class Job:
    job_id: int
    title: str
    business_id: Optional[int] = None
    employer_id: Optional[int] = None
    hourly_rate: Optional[float] = None
    location: Optional[LocationDetails] = None


@dataclass(frozen=True)
class Employment:
    """A worker hired for a job; may carry its own work-location override."""

    employment_id: int
    worker_id: int
    job_id: int
    business_id: Optional[int] = None
    employer_id: Optional[int] = None
    status: EmploymentStatus = EmploymentStatus.ACTIVE
    hourly_rate: Optional[float] = None
    work_location: Optional[str] = None
    work_location_details: Optional[LocationDetails] = None
