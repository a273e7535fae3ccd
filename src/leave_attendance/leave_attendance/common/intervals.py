"""Inclusive date intervals.

Both leave requests and attendance lookups work on closed ``[start, end]``
ranges of calendar days, so two ranges touching on a single day overlap.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .validators import require_ordered_dates


def intervals_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Inclusive-bounds intersection test. Callers validate ``start <= end``."""
    return a_start <= b_end and b_start <= a_end


@dataclass(frozen=True)
class DateInterval:
    start: date
    end: date

    def __post_init__(self) -> None:
        require_ordered_dates(self.start, self.end)

    @classmethod
    def for_year(cls, year: int) -> "DateInterval":
        return cls(date(year, 1, 1), date(year, 12, 31))

    @property
    def days(self) -> int:
        """Number of calendar days, counting both endpoints."""
        return (self.end - self.start).days + 1

    def overlaps(self, other: "DateInterval") -> bool:
        return intervals_overlap(self.start, self.end, other.start, other.end)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

