from __future__ import annotations

from typing import Optional, Protocol

from .model import Business, Employment, Job, Worker


class WorkerRepository(Protocol):
    def get_by_id(self, worker_id: int) -> Optional[Worker]:
        raise NotImplementedError


class JobRepository(Protocol):
    def get_by_id(self, job_id: int) -> Optional[Job]:
        raise NotImplementedError


class BusinessRepository(Protocol):
    def get_by_id(self, business_id: int) -> Optional[Business]:
        raise NotImplementedError


class EmploymentRepository(Protocol):
    def get_active_for_worker_and_job(self, *, worker_id: int, job_id: int) -> Optional[Employment]:
        """Active employment of the worker for the job, if any."""

        raise NotImplementedError
