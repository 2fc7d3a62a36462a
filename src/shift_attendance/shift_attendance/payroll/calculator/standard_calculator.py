from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import hours_between
from ...common.validators import require_non_negative
from ...core.exceptions import ValidationError
from .base import PayrollCalculator, PayrollResult, round_to_two


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: hours = out - in, earnings = rounded hours x rate; both to 2 dp."""

    def compute(self, clock_in: datetime, clock_out: datetime, hourly_rate: float) -> PayrollResult:
        if clock_out < clock_in:
            raise ValidationError("Clock-out cannot be earlier than clock-in")
        return self.earnings_for(hours_between(clock_in, clock_out), hourly_rate)

    def earnings_for(self, total_hours: float, hourly_rate: float) -> PayrollResult:
        hours = round_to_two(require_non_negative(total_hours, "totalHours"))
        rate = require_non_negative(hourly_rate, "hourlyRate")
        return PayrollResult(total_hours=hours, earnings=round_to_two(hours * rate))
