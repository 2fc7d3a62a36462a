from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

from src.shift_attendance.shift_attendance.core.enums import LocationSource, ShiftStatus
from src.shift_attendance.shift_attendance.geo.model import GeofenceSnapshot
from src.shift_attendance.shift_attendance.shifts.model import ShiftFilter, ShiftRecord
from src.shift_attendance.shift_attendance.shifts.mysql_shift_repository import MySQLShiftRepository


class FakeCursor:
    def __init__(self, rows=(), rowcount=1, lastrowid=None):
        self.rows = list(rows)
        self.rowcount = rowcount
        self.lastrowid = lastrowid
        self.executed: list[tuple[str, tuple]] = []

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return self.rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, cursor: FakeCursor):
        self.cursor = cursor
        self.connection = FakeConnection(cursor)

    def connect(self, *, with_database: bool = True):
        return self.connection


START = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)


def _record(**kwargs) -> ShiftRecord:
    defaults = dict(
        shift_id=5,
        worker_id=7,
        job_id=1,
        scheduled_start=START,
        scheduled_end=START + timedelta(hours=8),
        status=ShiftStatus.CLOCKED_IN,
        clock_in_at=START,
        job_location=GeofenceSnapshot(latitude=1.5, longitude=2.5, allowed_radius=150, source=LocationSource.JOB),
        version=3,
        created_at=START,
        updated_at=START,
    )
    defaults.update(kwargs)
    return ShiftRecord(**defaults)


def test_conditional_update_checks_version():
    factory = FakeConnFactory(FakeCursor(rowcount=1))

    saved = MySQLShiftRepository(factory).save_if_unchanged(_record(), expected_version=3)

    sql, params = factory.cursor.executed[0]
    assert "WHERE shift_id=%s AND version=%s" in sql
    assert "version=version+1" in sql
    assert params[-2:] == (5, 3)
    assert "clocked-in" in params
    assert START.replace(tzinfo=None) in params
    assert saved.version == 4
    assert factory.connection.committed


def test_conditional_update_lost_returns_none():
    factory = FakeConnFactory(FakeCursor(rowcount=0))

    assert MySQLShiftRepository(factory).save_if_unchanged(_record(), expected_version=2) is None


def test_rows_are_mapped_back_to_records():
    row = {
        "shift_id": 5,
        "worker_id": 7,
        "employer_id": None,
        "job_id": 1,
        "business_id": 9,
        "scheduled_start": START.replace(tzinfo=None),
        "scheduled_end": (START + timedelta(hours=8)).replace(tzinfo=None),
        "clock_in_at": None,
        "clock_out_at": None,
        "status": "scheduled",
        "hourly_rate": 15.0,
        "total_hours": 0,
        "earnings": 0,
        "is_late": 0,
        "job_location": json.dumps({"latitude": 1.5, "longitude": 2.5, "allowed_radius": 150, "source": "business"}),
        "clock_in_location": None,
        "clock_out_location": None,
        "notes": None,
        "worker_name_snapshot": "Asha Rao",
        "job_title_snapshot": "Barista",
        "location_snapshot": None,
        "version": 1,
        "created_at": START.replace(tzinfo=None),
        "updated_at": START.replace(tzinfo=None),
    }
    factory = FakeConnFactory(FakeCursor(rows=[row]))

    record = MySQLShiftRepository(factory).get_by_id(5)

    assert record.scheduled_start == START
    assert record.status == ShiftStatus.SCHEDULED
    assert record.job_location.source == LocationSource.BUSINESS
    assert record.is_late is False


def test_list_builds_where_clause_from_filter():
    factory = FakeConnFactory(FakeCursor(rows=[]))

    MySQLShiftRepository(factory).list(ShiftFilter(worker_id=7, status=ShiftStatus.MISSED, limit=10))

    sql, params = factory.cursor.executed[0]
    assert "WHERE worker_id=%s AND status=%s" in sql
    assert sql.endswith("LIMIT %s")
    assert params == (7, "missed", 10)
