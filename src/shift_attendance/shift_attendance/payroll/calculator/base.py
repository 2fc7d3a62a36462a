from __future__ import annotations

import math
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


def round_to_two(value: float) -> float:
    """Round half away from zero to 2 decimals, nudged by machine epsilon.

    1.005 -> 1.01 (a plain round() gives 1.0 because of binary representation).
    """
    if not value:
        return 0.0
    scaled = (abs(value) + sys.float_info.epsilon) * 100
    return math.copysign(math.floor(scaled + 0.5) / 100, value)


@dataclass(frozen=True)
class PayrollResult:
    total_hours: float
    earnings: float


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute(self, clock_in: datetime, clock_out: datetime, hourly_rate: float) -> PayrollResult:
        raise NotImplementedError

    @abstractmethod
    def earnings_for(self, total_hours: float, hourly_rate: float) -> PayrollResult:
        """Payroll for an hour total entered by hand (administrative correction)."""

        raise NotImplementedError
