"""Example: drive the attendance service layer directly (no HTTP boundary).

Schedules a shift for worker 1 on job 1, clocks in and out from the job site
and prints the resulting payroll. Expects the rows to exist in the database
configured by APP_ENV / .env.
"""

from datetime import timedelta

from src.shift_attendance.shift_attendance.common.datetime_utils import now_utc
from src.shift_attendance.shift_attendance.core.enums import Role
from src.shift_attendance.shift_attendance.core.exceptions import DomainError
from src.shift_attendance.shift_attendance.geo.model import GpsReading
from src.shift_attendance.shift_attendance.main import create_engine


def main():
    container = create_engine()
    service = container.attendance_service

    start = now_utc().replace(minute=0, second=0, microsecond=0)
    shift = service.schedule(worker_id=1, job_id=1, scheduled_start=start, scheduled_end=start + timedelta(hours=8))
    if shift.job_location is None:
        print("Shift scheduled without geofence; configure a business location first")
        return

    here = GpsReading(latitude=shift.job_location.latitude, longitude=shift.job_location.longitude, accuracy=5)
    try:
        service.clock_in(shift.shift_id, reading=here, current_role=Role.WORKER, current_user_id=1)
        done = service.clock_out(
            shift.shift_id,
            reading=here,
            current_role=Role.WORKER,
            current_user_id=1,
            now=now_utc() + timedelta(hours=1),
        )
    except DomainError as exc:
        print(f"Rejected: {exc}")
        return

    print(f"shift={done.shift_id} status={done.status.value} hours={done.total_hours} earnings={done.earnings}")


if __name__ == "__main__":
    main()
