from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    if not isinstance(value, str):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}") from None


def parse_clock_time(value: str) -> time:
    """Parse HH:MM or HH:MM:SS wall-clock time."""
    if not isinstance(value, str):
        raise ValidationError(f"Invalid time (HH:MM[:SS]): {value!r}")
    v = value.strip()
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"Invalid time (HH:MM[:SS]): {value!r}")


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_iso_date(value)


def parse_optional_time(value: Optional[str]) -> Optional[time]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_clock_time(value)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def elapsed_minutes(work_date: date, start: time, end: time) -> int:
    """Whole minutes between two wall-clock times on the same day."""
    delta = datetime.combine(work_date, end) - datetime.combine(work_date, start)
    return int(delta.total_seconds() // 60)
