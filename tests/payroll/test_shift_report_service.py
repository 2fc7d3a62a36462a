from datetime import date, datetime, timedelta, timezone

from src.shift_attendance.shift_attendance.core.enums import ShiftStatus
from src.shift_attendance.shift_attendance.geo.model import GeofenceSnapshot
from src.shift_attendance.shift_attendance.payroll.service import ShiftReportService
from src.shift_attendance.shift_attendance.shifts.memory_shift_repository import InMemoryShiftRepository
from src.shift_attendance.shift_attendance.shifts.model import ShiftRecord


def _shift(shift_id, worker_id, day, **kwargs):
    start = datetime(2025, 1, day, 9, 0, tzinfo=timezone.utc)
    defaults = dict(
        shift_id=shift_id,
        worker_id=worker_id,
        business_id=9,
        job_id=1,
        scheduled_start=start,
        scheduled_end=start + timedelta(hours=8),
        version=1,
    )
    defaults.update(kwargs)
    return ShiftRecord(**defaults)


def _repo():
    day6 = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)
    return InMemoryShiftRepository(
        [
            _shift(
                1,
                7,
                6,
                status=ShiftStatus.COMPLETED,
                clock_in_at=day6 + timedelta(minutes=4),
                clock_out_at=day6 + timedelta(hours=5, minutes=4),
                total_hours=5.0,
                hourly_rate=15.0,
                earnings=75.0,
                is_late=True,
                worker_name_snapshot="Asha Rao",
                job_title_snapshot="Barista",
                location_snapshot="1 MG Road",
            ),
            _shift(
                2,
                8,
                6,
                status=ShiftStatus.CLOCKED_IN,
                clock_in_at=day6 - timedelta(minutes=2),
                job_location=GeofenceSnapshot(latitude=1.0, longitude=1.0, allowed_radius=150, label="Kiosk"),
            ),
            _shift(3, 7, 7, status=ShiftStatus.MISSED),
            _shift(4, 7, 8, status=ShiftStatus.COMPLETED, total_hours=2.34, earnings=35.03),
            _shift(5, 9, 6, business_id=10),
        ]
    )


def test_management_view_for_one_day_and_business():
    report = ShiftReportService(_repo()).build_management_view(work_date=date(2025, 1, 6), business_id=9)

    assert [r["shift_id"] for r in report.rows] == [1, 2]
    first, second = report.rows
    assert first["worker_name"] == "Asha Rao"
    assert first["location"] == "1 MG Road"
    assert (first["clock_in"], first["clock_out"]) == ("09:04", "14:04")
    assert first["scheduled_start"] == "09:00"
    assert second["worker_name"] == "Unknown Worker"
    assert second["job_title"] == "Untitled Role"
    assert second["location"] == "Kiosk"
    assert second["clock_out"] == "-"

    assert report.summary == {
        "total_workers": 2,
        "completed_shifts": 1,
        "total_hours": 5.0,
        "total_payroll": 75.0,
        "late_arrivals": 1,
    }


def test_management_view_filters_by_status():
    report = ShiftReportService(_repo()).build_management_view(
        work_date=date(2025, 1, 6), status=ShiftStatus.CLOCKED_IN
    )

    assert [r["shift_id"] for r in report.rows] == [2]
    assert report.summary["completed_shifts"] == 0


def test_worker_summary_over_a_date_range():
    summary = ShiftReportService(_repo()).build_worker_summary(
        worker_id=7, start=date(2025, 1, 6), end=date(2025, 1, 8)
    )

    assert summary == {
        "worker_id": 7,
        "shift_count": 3,
        "completed_shifts": 2,
        "missed_shifts": 1,
        "total_hours": 7.34,
        "total_earnings": 110.03,
    }
