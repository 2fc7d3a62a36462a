from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from typing import Optional

from src.shift_attendance.shift_attendance.attendance.service import AttendanceService
from src.shift_attendance.shift_attendance.core.enums import Role, ShiftStatus
from src.shift_attendance.shift_attendance.core.exceptions import InvalidStateError
from src.shift_attendance.shift_attendance.directory.model import Job
from src.shift_attendance.shift_attendance.geo.model import GeofenceSnapshot, GpsReading
from src.shift_attendance.shift_attendance.geofence.resolver import GeofenceResolver
from src.shift_attendance.shift_attendance.shifts.memory_shift_repository import InMemoryShiftRepository
from src.shift_attendance.shift_attendance.shifts.model import ShiftRecord


class RendezvousShifts(InMemoryShiftRepository):
    """Holds the first `parties` loads until all of them have read the same version."""

    def __init__(self, records, *, parties: int):
        super().__init__(records)
        self._barrier = threading.Barrier(parties)
        self._gate = threading.Lock()
        self._pending = parties

    def get_by_id(self, shift_id: int) -> Optional[ShiftRecord]:
        record = super().get_by_id(shift_id)
        with self._gate:
            gated = self._pending > 0
            self._pending -= 1
        if gated:
            self._barrier.wait(timeout=5)
        return record


class NoLookup:
    def get_employment_location(self, *, worker_id, job_id):
        return None

    def get_job_location(self, job_id):
        return None

    def get_job_business_id(self, job_id):
        return None

    def get_business_location(self, business_id):
        return None


class OneJob:
    def get_by_id(self, job_id):
        return Job(job_id, "Cashier", hourly_rate=12.0)


def test_two_simultaneous_clock_ins_yield_one_success(fixed_now):
    shift = ShiftRecord(
        shift_id=1,
        worker_id=7,
        job_id=1,
        scheduled_start=fixed_now,
        scheduled_end=fixed_now + timedelta(hours=8),
        job_location=GeofenceSnapshot(latitude=28.6139, longitude=77.2090, allowed_radius=150),
        version=1,
    )
    shifts = RendezvousShifts([shift], parties=2)
    service = AttendanceService(shifts, workers=None, jobs=OneJob(), resolver=GeofenceResolver(NoLookup()))
    here = GpsReading(latitude=28.6139, longitude=77.2090)

    def attempt(minute: int):
        try:
            return service.clock_in(
                1,
                reading=here,
                current_role=Role.WORKER,
                current_user_id=7,
                now=fixed_now + timedelta(minutes=minute),
            )
        except InvalidStateError as exc:
            return exc

    with ThreadPoolExecutor(max_workers=2) as pool:
        outcomes = list(pool.map(attempt, [1, 2]))

    successes = [o for o in outcomes if isinstance(o, ShiftRecord)]
    failures = [o for o in outcomes if isinstance(o, InvalidStateError)]
    assert len(successes) == 1
    assert len(failures) == 1
    assert "Already clocked in" in str(failures[0])

    stored = shifts.get_by_id(1)
    assert stored.status == ShiftStatus.CLOCKED_IN
    assert stored.version == 2
    assert stored.clock_in_at == successes[0].clock_in_at
