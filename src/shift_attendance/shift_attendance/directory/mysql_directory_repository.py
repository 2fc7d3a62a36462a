from __future__ import annotations

from typing import Any, Optional

from ..core.enums import EmploymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, optional_float, optional_int
from ..geo.model import LocationDetails
from .model import Business, Employment, Job, Worker
from .repository import BusinessRepository, EmploymentRepository, JobRepository, WorkerRepository


def _location_from_row(r: dict[str, Any], prefix: str, *, label: Optional[str] = None) -> Optional[LocationDetails]:
    lat = r.get(f"{prefix}_latitude")
    lon = r.get(f"{prefix}_longitude")
    formatted = r.get(f"{prefix}_formatted_address")
    address = r.get(f"{prefix}_address")
    if lat is None and lon is None and not formatted and not address:
        return None

    active = r.get(f"{prefix}_is_active")
    return LocationDetails(
        latitude=optional_float(lat),
        longitude=optional_float(lon),
        allowed_radius=optional_float(r.get(f"{prefix}_allowed_radius")),
        is_active=True if active is None else bool(active),
        label=label,
        formatted_address=formatted,
        address=address,
        city=r.get(f"{prefix}_city"),
        state=r.get(f"{prefix}_state"),
        postal_code=r.get(f"{prefix}_postal_code"),
    )


class MySQLWorkerRepository(WorkerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, worker_id: int) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT worker_id, first_name, last_name, email
                FROM workers
                WHERE worker_id=%s
                """,
                (int(worker_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Worker(
                worker_id=int(r["worker_id"]),
                first_name=r.get("first_name"),
                last_name=r.get("last_name"),
                email=r.get("email"),
            )


class MySQLBusinessRepository(BusinessRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, business_id: int) -> Optional[Business]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT business_id, name, owner_id,
                       location_latitude, location_longitude, location_allowed_radius,
                       location_is_active, location_name, location_formatted_address,
                       location_address, location_city, location_state, location_postal_code
                FROM businesses
                WHERE business_id=%s
                """,
                (int(business_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Business(
                business_id=int(r["business_id"]),
                name=r["name"],
                owner_id=optional_int(r.get("owner_id")),
                location=_location_from_row(r, "location", label=r.get("location_name") or r["name"]),
            )


class MySQLJobRepository(JobRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, job_id: int) -> Optional[Job]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT job_id, title, business_id, employer_id, hourly_rate,
                       location_latitude, location_longitude, location_allowed_radius,
                       location_formatted_address, location_address, location_city,
                       location_state, location_postal_code
                FROM jobs
                WHERE job_id=%s
                """,
                (int(job_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Job(
                job_id=int(r["job_id"]),
                title=r["title"],
                business_id=optional_int(r.get("business_id")),
                employer_id=optional_int(r.get("employer_id")),
                hourly_rate=optional_float(r.get("hourly_rate")),
                location=_location_from_row(r, "location", label=r["title"]),
            )


class MySQLEmploymentRepository(EmploymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active_for_worker_and_job(self, *, worker_id: int, job_id: int) -> Optional[Employment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employment_id, worker_id, job_id, business_id, employer_id,
                       employment_status, hourly_rate, work_location,
                       work_latitude, work_longitude, work_allowed_radius, work_label,
                       work_formatted_address, work_address, work_city, work_state, work_postal_code
                FROM worker_employments
                WHERE worker_id=%s AND job_id=%s AND employment_status=%s
                ORDER BY employment_id DESC
                LIMIT 1
                """,
                (int(worker_id), int(job_id), EmploymentStatus.ACTIVE.value),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Employment(
                employment_id=int(r["employment_id"]),
                worker_id=int(r["worker_id"]),
                job_id=int(r["job_id"]),
                business_id=optional_int(r.get("business_id")),
                employer_id=optional_int(r.get("employer_id")),
                status=EmploymentStatus(r["employment_status"]),
                hourly_rate=optional_float(r.get("hourly_rate")),
                work_location=r.get("work_location"),
                work_location_details=_location_from_row(r, "work", label=r.get("work_label")),
            )
