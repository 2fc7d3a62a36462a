from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ShiftStatus
from ..geo.model import GeofenceSnapshot, LocationFix


@dataclass(frozen=True)
class ShiftRecord:
    """Domain entity: one scheduled unit of work for one worker.

    Transitions build a new instance (dataclasses.replace); `version` is the
    optimistic-concurrency token checked by the store on every write.
    """

    shift_id: int
    worker_id: int
    scheduled_start: datetime
    scheduled_end: datetime
    employer_id: Optional[int] = None
    job_id: Optional[int] = None
    business_id: Optional[int] = None
    status: ShiftStatus = ShiftStatus.SCHEDULED
    clock_in_at: Optional[datetime] = None
    clock_out_at: Optional[datetime] = None
    hourly_rate: Optional[float] = None
    total_hours: float = 0.0
    earnings: float = 0.0
    is_late: bool = False
    job_location: Optional[GeofenceSnapshot] = None
    clock_in_location: Optional[LocationFix] = None
    clock_out_location: Optional[LocationFix] = None
    notes: Optional[str] = None
    worker_name_snapshot: Optional[str] = None
    job_title_snapshot: Optional[str] = None
    location_snapshot: Optional[str] = None
    version: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class ShiftFilter:
    """Query for ListShifts; date bounds are inclusive UTC days of scheduled_start."""

    worker_id: Optional[int] = None
    employer_id: Optional[int] = None
    job_id: Optional[int] = None
    business_id: Optional[int] = None
    status: Optional[ShiftStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    limit: Optional[int] = None

    def matches(self, record: ShiftRecord) -> bool:
        if self.worker_id is not None and record.worker_id != self.worker_id:
            return False
        if self.employer_id is not None and record.employer_id != self.employer_id:
            return False
        if self.job_id is not None and record.job_id != self.job_id:
            return False
        if self.business_id is not None and record.business_id != self.business_id:
            return False
        if self.status is not None and record.status != self.status:
            return False
        day = record.scheduled_start.date()
        if self.start_date is not None and day < self.start_date:
            return False
        if self.end_date is not None and day > self.end_date:
            return False
        return True
