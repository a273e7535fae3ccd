from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, time
from decimal import Decimal

from ..common.datetime_utils import elapsed_minutes
from ..core.constants import MINUTES_PER_HOUR, WORKING_HOURS_QUANTUM
from ..core.exceptions import InvalidInterval


class WorkingHoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for working hours)."""

    @abstractmethod
    def working_hours(self, *, work_date: date, clock_in: time, clock_out: time) -> Decimal:
        raise NotImplementedError


class ClockDifferenceCalculator(WorkingHoursCalculator):
    """Standard rule: whole minutes between clock-in and clock-out, divided by 60.

    Times are same-day wall-clock values. A clock-out earlier than the
    clock-in is rejected; overnight shifts are not supported.
    """

    def working_hours(self, *, work_date: date, clock_in: time, clock_out: time) -> Decimal:
        if clock_out < clock_in:
            raise InvalidInterval(
                f"Clock-out {clock_out.strftime('%H:%M')} is before clock-in {clock_in.strftime('%H:%M')}"
            )
        minutes = elapsed_minutes(work_date, clock_in, clock_out)
        return (Decimal(minutes) / Decimal(MINUTES_PER_HOUR)).quantize(WORKING_HOURS_QUANTUM)
