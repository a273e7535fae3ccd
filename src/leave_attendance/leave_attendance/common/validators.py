from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import InvalidInterval, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_text(value, field_name: str) -> Optional[str]:
    """Trimmed text, or None when missing or blank."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value.strip() or None


def require_positive_id(value, field_name: str) -> int:
    try:
        ident = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
    if ident <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return ident


def require_ordered_dates(start: date, end: date) -> None:
    if end < start:
        raise InvalidInterval(f"End date {end.isoformat()} is before start date {start.isoformat()}")
