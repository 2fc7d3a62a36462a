from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

from src.shift_attendance.shift_attendance.core.enums import ShiftStatus
from src.shift_attendance.shift_attendance.shifts.memory_shift_repository import InMemoryShiftRepository
from src.shift_attendance.shift_attendance.shifts.model import ShiftFilter, ShiftRecord


def _draft(worker_id: int, day: int, hour: int = 9) -> ShiftRecord:
    start = datetime(2025, 1, day, hour, 0, tzinfo=timezone.utc)
    return ShiftRecord(shift_id=0, worker_id=worker_id, scheduled_start=start, scheduled_end=start + timedelta(hours=4))


def test_create_assigns_ids_and_first_version():
    repo = InMemoryShiftRepository()

    a = repo.create(_draft(7, 6))
    b = repo.create(_draft(7, 7))

    assert (a.shift_id, b.shift_id) == (1, 2)
    assert a.version == b.version == 1
    assert repo.get_by_id(1) == a


def test_save_if_unchanged_rejects_stale_version():
    repo = InMemoryShiftRepository()
    stored = repo.create(_draft(7, 6))

    first = repo.save_if_unchanged(replace(stored, status=ShiftStatus.CLOCKED_IN), expected_version=1)
    second = repo.save_if_unchanged(replace(stored, status=ShiftStatus.MISSED), expected_version=1)

    assert first.version == 2
    assert second is None
    assert repo.get_by_id(stored.shift_id).status == ShiftStatus.CLOCKED_IN


def test_save_if_unchanged_for_unknown_shift():
    repo = InMemoryShiftRepository()

    assert repo.save_if_unchanged(replace(_draft(7, 6), shift_id=42), expected_version=0) is None


def test_list_orders_by_start_and_applies_filters():
    repo = InMemoryShiftRepository()
    late = repo.create(_draft(7, 8, hour=13))
    early = repo.create(_draft(7, 8, hour=6))
    other = repo.create(_draft(8, 6))
    outside = repo.create(_draft(7, 20))

    in_range = repo.list(ShiftFilter(worker_id=7, start_date=date(2025, 1, 1), end_date=date(2025, 1, 8)))
    assert [s.shift_id for s in in_range] == [early.shift_id, late.shift_id]

    everything = repo.list(ShiftFilter())
    assert [s.shift_id for s in everything] == [other.shift_id, early.shift_id, late.shift_id, outside.shift_id]

    assert len(repo.list(ShiftFilter(limit=2))) == 2
