from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import format_hhmm
from ..core.enums import ShiftStatus
from ..shifts.model import ShiftFilter, ShiftRecord
from ..shifts.repository import ShiftRepository
from .calculator.base import round_to_two


@dataclass(frozen=True)
class ManagementReport:
    rows: list[dict]
    summary: dict


def _location_label(r: ShiftRecord) -> str:
    if r.location_snapshot:
        return r.location_snapshot
    if r.job_location is not None:
        return r.job_location.address or r.job_location.label or "-"
    return "-"


class ShiftReportService:
    """Read-only views over shift records for employers and workers."""

    def __init__(self, shifts: ShiftRepository):
        self._shifts = shifts

    def build_management_view(
        self,
        *,
        work_date: date,
        business_id: Optional[int] = None,
        worker_id: Optional[int] = None,
        job_id: Optional[int] = None,
        status: Optional[ShiftStatus] = None,
    ) -> ManagementReport:
        records = self._shifts.list(
            ShiftFilter(
                business_id=business_id,
                worker_id=worker_id,
                job_id=job_id,
                status=status,
                start_date=work_date,
                end_date=work_date,
            )
        )

        rows = [self._to_row(r) for r in records]

        summary = {
            "total_workers": 0,
            "completed_shifts": 0,
            "total_hours": 0.0,
            "total_payroll": 0.0,
            "late_arrivals": 0,
        }
        for r in records:
            summary["total_workers"] += 1
            if r.status == ShiftStatus.COMPLETED:
                summary["completed_shifts"] += 1
            if r.is_late:
                summary["late_arrivals"] += 1
            summary["total_hours"] = round_to_two(summary["total_hours"] + (r.total_hours or 0))
            summary["total_payroll"] = round_to_two(summary["total_payroll"] + (r.earnings or 0))

        return ManagementReport(rows=rows, summary=summary)

    def build_worker_summary(
        self,
        *,
        worker_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> dict:
        records = self._shifts.list(ShiftFilter(worker_id=worker_id, start_date=start, end_date=end))

        total_hours = 0.0
        total_earnings = 0.0
        completed = 0
        missed = 0
        for r in records:
            total_hours = round_to_two(total_hours + (r.total_hours or 0))
            total_earnings = round_to_two(total_earnings + (r.earnings or 0))
            if r.status == ShiftStatus.COMPLETED:
                completed += 1
            elif r.status == ShiftStatus.MISSED:
                missed += 1

        return {
            "worker_id": worker_id,
            "shift_count": len(records),
            "completed_shifts": completed,
            "missed_shifts": missed,
            "total_hours": total_hours,
            "total_earnings": total_earnings,
        }

    def _to_row(self, r: ShiftRecord) -> dict:
        return {
            "shift_id": r.shift_id,
            "worker_id": r.worker_id,
            "worker_name": r.worker_name_snapshot or "Unknown Worker",
            "job_id": r.job_id,
            "job_title": r.job_title_snapshot or "Untitled Role",
            "location": _location_label(r),
            "date": r.scheduled_start.strftime("%Y-%m-%d"),
            "scheduled_start": format_hhmm(r.scheduled_start),
            "scheduled_end": format_hhmm(r.scheduled_end),
            "clock_in": format_hhmm(r.clock_in_at) or "-",
            "clock_out": format_hhmm(r.clock_out_at) or "-",
            "total_hours": float(r.total_hours or 0),
            "hourly_rate": float(r.hourly_rate or 0),
            "earnings": float(r.earnings or 0),
            "status": r.status.value,
            "is_late": bool(r.is_late),
        }
