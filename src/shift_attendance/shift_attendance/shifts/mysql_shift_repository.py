from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional, Sequence

from ..common.datetime_utils import day_bounds
from ..core.enums import ShiftStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    from_json_column,
    from_mysql_datetime,
    optional_float,
    optional_int,
    to_json_column,
    to_mysql_datetime,
)
from ..geo.model import GeofenceSnapshot, LocationFix
from .model import ShiftFilter, ShiftRecord
from .repository import ShiftRepository

_COLUMNS = """
    shift_id, worker_id, employer_id, job_id, business_id,
    scheduled_start, scheduled_end, clock_in_at, clock_out_at, status,
    hourly_rate, total_hours, earnings, is_late,
    job_location, clock_in_location, clock_out_location,
    notes, worker_name_snapshot, job_title_snapshot, location_snapshot,
    version, created_at, updated_at
"""

_MUTABLE_FIELDS = (
    "employer_id",
    "job_id",
    "business_id",
    "scheduled_start",
    "scheduled_end",
    "clock_in_at",
    "clock_out_at",
    "status",
    "hourly_rate",
    "total_hours",
    "earnings",
    "is_late",
    "job_location",
    "clock_in_location",
    "clock_out_location",
    "notes",
    "worker_name_snapshot",
    "job_title_snapshot",
    "location_snapshot",
    "updated_at",
)


def _row_to_record(r: dict[str, Any]) -> ShiftRecord:
    job_location = from_json_column(r.get("job_location"))
    clock_in_location = from_json_column(r.get("clock_in_location"))
    clock_out_location = from_json_column(r.get("clock_out_location"))
    return ShiftRecord(
        shift_id=int(r["shift_id"]),
        worker_id=int(r["worker_id"]),
        employer_id=optional_int(r.get("employer_id")),
        job_id=optional_int(r.get("job_id")),
        business_id=optional_int(r.get("business_id")),
        scheduled_start=from_mysql_datetime(r["scheduled_start"]),
        scheduled_end=from_mysql_datetime(r["scheduled_end"]),
        clock_in_at=from_mysql_datetime(r.get("clock_in_at")),
        clock_out_at=from_mysql_datetime(r.get("clock_out_at")),
        status=ShiftStatus(r["status"]),
        hourly_rate=optional_float(r.get("hourly_rate")),
        total_hours=float(r.get("total_hours") or 0),
        earnings=float(r.get("earnings") or 0),
        is_late=bool(r.get("is_late")),
        job_location=GeofenceSnapshot.from_dict(job_location) if job_location else None,
        clock_in_location=LocationFix.from_dict(clock_in_location) if clock_in_location else None,
        clock_out_location=LocationFix.from_dict(clock_out_location) if clock_out_location else None,
        notes=r.get("notes"),
        worker_name_snapshot=r.get("worker_name_snapshot"),
        job_title_snapshot=r.get("job_title_snapshot"),
        location_snapshot=r.get("location_snapshot"),
        version=int(r["version"]),
        created_at=from_mysql_datetime(r.get("created_at")),
        updated_at=from_mysql_datetime(r.get("updated_at")),
    )


def _column_value(record: ShiftRecord, field: str) -> Any:
    value = getattr(record, field)
    if field in ("job_location", "clock_in_location", "clock_out_location"):
        return to_json_column(value.to_dict()) if value is not None else None
    if field == "status":
        return value.value
    if field == "is_late":
        return int(bool(value))
    if field in ("scheduled_start", "scheduled_end", "clock_in_at", "clock_out_at", "created_at", "updated_at"):
        return to_mysql_datetime(value)
    return value


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, shift_id: int) -> Optional[ShiftRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM shifts WHERE shift_id=%s", (int(shift_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list(self, shift_filter: ShiftFilter) -> Sequence[ShiftRecord]:
        clauses: list[str] = []
        params: list[object] = []

        for column in ("worker_id", "employer_id", "job_id", "business_id"):
            value = getattr(shift_filter, column)
            if value is not None:
                clauses.append(f"{column}=%s")
                params.append(int(value))
        if shift_filter.status is not None:
            clauses.append("status=%s")
            params.append(shift_filter.status.value)
        if shift_filter.start_date is not None:
            clauses.append("scheduled_start >= %s")
            params.append(to_mysql_datetime(day_bounds(shift_filter.start_date)[0]))
        if shift_filter.end_date is not None:
            clauses.append("scheduled_start < %s")
            params.append(to_mysql_datetime(day_bounds(shift_filter.end_date)[1]))

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        limit = ""
        if shift_filter.limit is not None:
            limit = "LIMIT %s"
            params.append(int(shift_filter.limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM shifts
                {where}
                ORDER BY scheduled_start ASC, shift_id ASC
                {limit}
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def create(self, record: ShiftRecord) -> ShiftRecord:
        fields = ("worker_id",) + _MUTABLE_FIELDS + ("created_at",)
        values = [_column_value(record, f) for f in fields]
        placeholders = ",".join(["%s"] * (len(fields) + 1))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO shifts({', '.join(fields)}, version) VALUES({placeholders})",
                tuple(values) + (1,),
            )
            return replace(record, shift_id=int(cur.lastrowid), version=1)

    def save_if_unchanged(self, record: ShiftRecord, *, expected_version: int) -> Optional[ShiftRecord]:
        assignments = ", ".join(f"{f}=%s" for f in _MUTABLE_FIELDS)
        values = tuple(_column_value(record, f) for f in _MUTABLE_FIELDS)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE shifts
                SET {assignments}, version=version+1
                WHERE shift_id=%s AND version=%s
                """,
                values + (int(record.shift_id), int(expected_version)),
            )
            if cur.rowcount != 1:
                return None
            return replace(record, version=int(expected_version) + 1)
