from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Sequence, Union

from ..common.datetime_utils import ensure_utc, now_utc
from ..common.validators import require_latitude, require_longitude, require_non_negative
from ..core.constants import DEFAULT_LIST_LIMIT, DEFAULT_SAVE_ATTEMPTS
from ..core.enums import Role, ShiftStatus
from ..core.exceptions import (
    ConcurrentUpdateError,
    DomainError,
    ForbiddenError,
    InvalidStateError,
    LocationRejectedError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from ..directory.repository import JobRepository, WorkerRepository
from ..geo.distance import distance_meters
from ..geo.model import GeofenceSnapshot, GpsReading, LocationDetails, LocationFix
from ..geofence.resolver import GeofenceResolver
from ..geofence.sources import Resolved
from ..payroll.calculator.base import PayrollCalculator, round_to_two
from ..payroll.calculator.standard_calculator import StandardPayrollCalculator
from ..shifts.model import ShiftFilter, ShiftRecord
from ..shifts.repository import ShiftRepository

logger = logging.getLogger(__name__)

MISSING_GEOFENCE_MESSAGE = "Job is missing GPS location; configure a business location before clocking in or out"


def _format_radius(radius: float) -> str:
    return f"{radius:g}"


class AttendanceService:
    """Shift lifecycle: scheduled -> clocked-in -> completed (or scheduled -> missed).

    Every transition is load -> validate -> build -> conditional save. A lost
    conditional write reloads and validates again, so a second concurrent
    clock-in fails with "Already clocked in" instead of overwriting the first.
    """

    def __init__(
        self,
        shifts: ShiftRepository,
        workers: WorkerRepository,
        jobs: JobRepository,
        resolver: GeofenceResolver,
        *,
        calculator: Optional[PayrollCalculator] = None,
        save_attempts: int = DEFAULT_SAVE_ATTEMPTS,
    ):
        self._shifts = shifts
        self._workers = workers
        self._jobs = jobs
        self._resolver = resolver
        self._calculator = calculator or StandardPayrollCalculator()
        self._save_attempts = max(1, int(save_attempts))

    # ---- reads ----

    def get_shift(self, shift_id: int) -> ShiftRecord:
        record = self._shifts.get_by_id(shift_id)
        if record is None:
            raise NotFoundError("Shift", shift_id)
        return record

    def list_shifts(self, shift_filter: Optional[ShiftFilter] = None) -> Sequence[ShiftRecord]:
        shift_filter = shift_filter or ShiftFilter()
        if shift_filter.limit is None:
            shift_filter = replace(shift_filter, limit=DEFAULT_LIST_LIMIT)
        return self._shifts.list(shift_filter)

    # ---- scheduling ----

    def schedule(
        self,
        *,
        worker_id: int,
        job_id: int,
        scheduled_start: datetime,
        scheduled_end: datetime,
        hourly_rate: Optional[float] = None,
        geofence: Optional[LocationDetails] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ShiftRecord:
        now = ensure_utc(now) or now_utc()
        start = ensure_utc(scheduled_start)
        end = ensure_utc(scheduled_end)
        if start is None or end is None:
            raise ValidationError("Scheduled start and end are required")
        if end <= start:
            raise ValidationError("Scheduled end must be after scheduled start")

        worker = self._workers.get_by_id(worker_id)
        if not worker:
            raise ValidationError(f"Worker not found: {worker_id}")
        job = self._jobs.get_by_id(job_id)
        if not job:
            raise ValidationError(f"Job not found: {job_id}")

        rate = hourly_rate if hourly_rate is not None else job.hourly_rate
        if rate is not None:
            rate = require_non_negative(rate, "hourlyRate")

        draft = ShiftRecord(
            shift_id=0,
            worker_id=int(worker.worker_id),
            employer_id=job.employer_id,
            job_id=int(job.job_id),
            business_id=job.business_id,
            scheduled_start=start,
            scheduled_end=end,
            hourly_rate=rate,
            notes=notes,
            worker_name_snapshot=worker.display_name,
            job_title_snapshot=job.title,
            created_at=now,
            updated_at=now,
        )

        # Shifts may be scheduled before the business has a location; clock-in resolves again.
        resolution = self._resolver.resolve_for_shift(draft, explicit=geofence)
        if isinstance(resolution, Resolved):
            draft = replace(draft, job_location=resolution.snapshot, location_snapshot=resolution.label)
        else:
            logger.info("Shift for worker=%s job=%s scheduled without geofence", worker_id, job_id)

        created = self._shifts.create(draft)
        logger.info(
            "Scheduled shift=%s worker=%s job=%s %s..%s",
            created.shift_id,
            created.worker_id,
            created.job_id,
            start.isoformat(),
            end.isoformat(),
        )
        return created

    # ---- worker transitions ----

    def clock_in(
        self,
        shift_id: int,
        *,
        reading: GpsReading,
        current_role: Union[Role, str],
        current_user_id: int,
        geofence: Optional[LocationDetails] = None,
        now: Optional[datetime] = None,
    ) -> ShiftRecord:
        now = ensure_utc(now) or now_utc()
        logger.info("Clock-in attempt shift=%s user=%s", shift_id, current_user_id)

        def apply(record: ShiftRecord) -> ShiftRecord:
            self._check_owner(record, current_role, current_user_id)
            if record.clock_in_at is not None:
                raise InvalidStateError("Already clocked in", current_status=record.status.value)
            if record.status != ShiftStatus.SCHEDULED:
                raise InvalidStateError(
                    f"Cannot clock in to a {record.status.value} shift", current_status=record.status.value
                )

            snapshot, label = self._geofence_for(record, geofence)
            fix = self._check_position(snapshot, reading, now)

            return replace(
                record,
                clock_in_at=now,
                status=ShiftStatus.CLOCKED_IN,
                is_late=now > record.scheduled_start,
                clock_in_location=fix,
                hourly_rate=self._rate_for(record),
                job_location=snapshot,
                location_snapshot=record.location_snapshot or label,
                updated_at=now,
            )

        saved = self._transition(shift_id, "clock-in", apply)
        logger.info(
            "Clocked in shift=%s worker=%s late=%s distance=%sm",
            saved.shift_id,
            saved.worker_id,
            saved.is_late,
            saved.clock_in_location.distance_meters,
        )
        return saved

    def clock_out(
        self,
        shift_id: int,
        *,
        reading: GpsReading,
        current_role: Union[Role, str],
        current_user_id: int,
        geofence: Optional[LocationDetails] = None,
        now: Optional[datetime] = None,
    ) -> ShiftRecord:
        now = ensure_utc(now) or now_utc()
        logger.info("Clock-out attempt shift=%s user=%s", shift_id, current_user_id)

        def apply(record: ShiftRecord) -> ShiftRecord:
            self._check_owner(record, current_role, current_user_id)
            if record.clock_in_at is None:
                raise InvalidStateError("Please clock in before clocking out", current_status=record.status.value)
            if record.clock_out_at is not None:
                raise InvalidStateError("Already clocked out", current_status=record.status.value)

            snapshot, label = self._geofence_for(record, geofence)
            fix = self._check_position(snapshot, reading, now)

            rate = self._rate_for(record)
            payroll = self._calculator.compute(record.clock_in_at, now, rate)
            return replace(
                record,
                clock_out_at=now,
                status=ShiftStatus.COMPLETED,
                clock_out_location=fix,
                hourly_rate=rate,
                total_hours=payroll.total_hours,
                earnings=payroll.earnings,
                job_location=snapshot,
                location_snapshot=record.location_snapshot or label,
                updated_at=now,
            )

        saved = self._transition(shift_id, "clock-out", apply)
        logger.info(
            "Clocked out shift=%s worker=%s hours=%s earnings=%s",
            saved.shift_id,
            saved.worker_id,
            saved.total_hours,
            saved.earnings,
        )
        return saved

    # ---- administrative transitions ----

    def mark_complete(self, shift_id: int, *, now: Optional[datetime] = None) -> ShiftRecord:
        """Close a clocked-in shift without a worker clock-out (no location check)."""
        now = ensure_utc(now) or now_utc()

        def apply(record: ShiftRecord) -> ShiftRecord:
            if record.status != ShiftStatus.CLOCKED_IN:
                raise InvalidStateError(
                    f"Only clocked-in shifts can be marked complete (current: {record.status.value})",
                    current_status=record.status.value,
                )
            if record.clock_in_at is None:
                raise PreconditionFailedError("Shift has no clock-in time")

            candidate = record.scheduled_end if record.scheduled_end > record.clock_in_at else now
            effective = max(min(now, candidate), record.clock_in_at)

            rate = self._rate_for(record)
            payroll = self._calculator.compute(record.clock_in_at, effective, rate)
            return replace(
                record,
                clock_out_at=effective,
                status=ShiftStatus.COMPLETED,
                hourly_rate=rate,
                total_hours=payroll.total_hours,
                earnings=payroll.earnings,
                updated_at=now,
            )

        saved = self._transition(shift_id, "mark-complete", apply)
        logger.info("Marked shift=%s complete hours=%s earnings=%s", saved.shift_id, saved.total_hours, saved.earnings)
        return saved

    def adjust_hours(
        self,
        shift_id: int,
        *,
        total_hours: float,
        hourly_rate: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> ShiftRecord:
        """Overwrite hours/rate/earnings; timestamps and status stay as they are."""
        now = ensure_utc(now) or now_utc()
        hours = require_non_negative(total_hours, "totalHours")

        def apply(record: ShiftRecord) -> ShiftRecord:
            rate = hourly_rate if hourly_rate is not None else self._rate_for(record)
            payroll = self._calculator.earnings_for(hours, require_non_negative(rate, "hourlyRate"))
            return replace(
                record,
                total_hours=payroll.total_hours,
                hourly_rate=float(rate),
                earnings=payroll.earnings,
                updated_at=now,
            )

        saved = self._transition(shift_id, "adjust-hours", apply)
        logger.info("Adjusted shift=%s hours=%s rate=%s", saved.shift_id, saved.total_hours, saved.hourly_rate)
        return saved

    def mark_missed(self, shift_id: int, *, now: Optional[datetime] = None) -> ShiftRecord:
        """Entry point for the external sweep; only scheduled shifts can be missed."""
        now = ensure_utc(now) or now_utc()

        def apply(record: ShiftRecord) -> ShiftRecord:
            if record.status != ShiftStatus.SCHEDULED:
                raise InvalidStateError(
                    f"Only scheduled shifts can be marked missed (current: {record.status.value})",
                    current_status=record.status.value,
                )
            return replace(record, status=ShiftStatus.MISSED, updated_at=now)

        saved = self._transition(shift_id, "mark-missed", apply)
        logger.info("Marked shift=%s missed", saved.shift_id)
        return saved

    # ---- helpers ----

    def _transition(self, shift_id: int, action: str, apply: Callable[[ShiftRecord], ShiftRecord]) -> ShiftRecord:
        try:
            for attempt in range(1, self._save_attempts + 1):
                current = self.get_shift(shift_id)
                updated = apply(current)
                saved = self._shifts.save_if_unchanged(updated, expected_version=current.version)
                if saved is not None:
                    return saved
                logger.info(
                    "Lost conditional write for shift=%s action=%s (attempt %s/%s)",
                    shift_id,
                    action,
                    attempt,
                    self._save_attempts,
                )
            raise ConcurrentUpdateError(
                f"Shift {shift_id} was modified concurrently; please retry",
                current_status=current.status.value,
            )
        except DomainError as exc:
            logger.warning("%s rejected for shift=%s: %s", action, shift_id, exc)
            raise

    @staticmethod
    def _check_owner(record: ShiftRecord, current_role: Union[Role, str], current_user_id: int) -> None:
        if Role(current_role) == Role.WORKER and int(current_user_id) != record.worker_id:
            raise ForbiddenError("You can only clock in or out of your own shifts")

    def _geofence_for(
        self, record: ShiftRecord, explicit: Optional[LocationDetails]
    ) -> tuple[GeofenceSnapshot, Optional[str]]:
        resolution = self._resolver.resolve_for_shift(record, explicit=explicit)
        if not isinstance(resolution, Resolved):
            raise PreconditionFailedError(MISSING_GEOFENCE_MESSAGE)
        return resolution.snapshot, resolution.label

    def _check_position(self, snapshot: GeofenceSnapshot, reading: GpsReading, now: datetime) -> LocationFix:
        latitude = require_latitude(reading.latitude)
        longitude = require_longitude(reading.longitude)
        distance = distance_meters(latitude, longitude, snapshot.latitude, snapshot.longitude)

        if not snapshot.is_active:
            is_valid, message = True, "Location verification disabled for this job"
        elif distance <= snapshot.allowed_radius:
            is_valid, message = True, "Location verified"
        else:
            raise LocationRejectedError(
                f"Worker is {round(distance)}m away from job location "
                f"(max allowed: {_format_radius(snapshot.allowed_radius)}m)",
                distance_meters=round_to_two(distance),
                allowed_radius=snapshot.allowed_radius,
            )

        return LocationFix(
            latitude=latitude,
            longitude=longitude,
            captured_at=now,
            distance_meters=round_to_two(distance),
            is_valid=is_valid,
            message=message,
            accuracy=reading.accuracy,
            altitude=reading.altitude,
            heading=reading.heading,
            speed=reading.speed,
            address=reading.address,
        )

    def _rate_for(self, record: ShiftRecord) -> float:
        if record.hourly_rate is not None:
            return float(record.hourly_rate)
        if record.job_id is not None:
            job = self._jobs.get_by_id(record.job_id)
            if job and job.hourly_rate is not None:
                return float(job.hourly_rate)
        return 0.0
