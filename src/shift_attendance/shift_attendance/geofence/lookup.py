from __future__ import annotations

from dataclasses import replace
from typing import Optional, Protocol

from ..directory.repository import BusinessRepository, EmploymentRepository, JobRepository
from ..geo.model import LocationDetails


class LocationLookup(Protocol):
    """Upstream location reads the resolver needs; each returns None when unset."""

    def get_employment_location(self, *, worker_id: int, job_id: int) -> Optional[LocationDetails]:
        raise NotImplementedError

    def get_job_location(self, job_id: int) -> Optional[LocationDetails]:
        raise NotImplementedError

    def get_job_business_id(self, job_id: int) -> Optional[int]:
        raise NotImplementedError

    def get_business_location(self, business_id: int) -> Optional[LocationDetails]:
        raise NotImplementedError


class DirectoryLocationLookup(LocationLookup):
    """LocationLookup backed by the job/business/employment repositories."""

    def __init__(self, jobs: JobRepository, businesses: BusinessRepository, employments: EmploymentRepository):
        self._jobs = jobs
        self._businesses = businesses
        self._employments = employments

    def get_employment_location(self, *, worker_id: int, job_id: int) -> Optional[LocationDetails]:
        employment = self._employments.get_active_for_worker_and_job(worker_id=worker_id, job_id=job_id)
        if not employment or not employment.work_location_details:
            return None

        details = employment.work_location_details
        if not details.label and employment.work_location:
            details = replace(details, label=employment.work_location)
        return details

    def get_job_location(self, job_id: int) -> Optional[LocationDetails]:
        job = self._jobs.get_by_id(job_id)
        return job.location if job else None

    def get_job_business_id(self, job_id: int) -> Optional[int]:
        job = self._jobs.get_by_id(job_id)
        return job.business_id if job else None

    def get_business_location(self, business_id: int) -> Optional[LocationDetails]:
        business = self._businesses.get_by_id(business_id)
        return business.location if business else None
