from __future__ import annotations

from dataclasses import dataclass

from .attendance.service import AttendanceService
from .core.constants import DEFAULT_SAVE_ATTEMPTS
from .database.connection import DBConfig, DatabaseConnection
from .directory.mysql_directory_repository import (
    MySQLBusinessRepository,
    MySQLEmploymentRepository,
    MySQLJobRepository,
    MySQLWorkerRepository,
)
from .geofence.lookup import DirectoryLocationLookup
from .geofence.resolver import GeofenceResolver
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.service import ShiftReportService
from .shifts.mysql_shift_repository import MySQLShiftRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    workers_repo: MySQLWorkerRepository
    jobs_repo: MySQLJobRepository
    businesses_repo: MySQLBusinessRepository
    employments_repo: MySQLEmploymentRepository
    shifts_repo: MySQLShiftRepository

    resolver: GeofenceResolver
    attendance_service: AttendanceService
    shift_report_service: ShiftReportService


def build_container(*, db_config: dict, save_attempts: int = DEFAULT_SAVE_ATTEMPTS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    workers_repo = MySQLWorkerRepository(conn)
    jobs_repo = MySQLJobRepository(conn)
    businesses_repo = MySQLBusinessRepository(conn)
    employments_repo = MySQLEmploymentRepository(conn)
    shifts_repo = MySQLShiftRepository(conn)

    resolver = GeofenceResolver(DirectoryLocationLookup(jobs_repo, businesses_repo, employments_repo))
    attendance_service = AttendanceService(
        shifts_repo,
        workers_repo,
        jobs_repo,
        resolver,
        calculator=StandardPayrollCalculator(),
        save_attempts=save_attempts,
    )
    shift_report_service = ShiftReportService(shifts_repo)

    return Container(
        conn=conn,
        workers_repo=workers_repo,
        jobs_repo=jobs_repo,
        businesses_repo=businesses_repo,
        employments_repo=employments_repo,
        shifts_repo=shifts_repo,
        resolver=resolver,
        attendance_service=attendance_service,
        shift_report_service=shift_report_service,
    )
