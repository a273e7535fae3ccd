from __future__ import annotations

from enum import Enum

from .exceptions import ValidationError


class AttendanceStatus(str, Enum):
    """Daily attendance label. Free to change; not a state machine."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    ON_LEAVE = "ON_LEAVE"

    @classmethod
    def parse(cls, value: str) -> "AttendanceStatus":
        try:
            return cls(str(value or "").strip().upper())
        except ValueError:
            raise ValidationError(f"Unknown attendance status: {value!r}") from None


class LeaveStatus(str, Enum):
    """Approval state of a leave request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELED = "CANCELED"

    @classmethod
    def parse(cls, value: str) -> "LeaveStatus":
        try:
            return cls(str(value or "").strip().upper())
        except ValueError:
            raise ValidationError(f"Unknown leave status: {value!r}") from None

    @property
    def is_active(self) -> bool:
        return self in ACTIVE_LEAVE_STATUSES

    def can_transition_to(self, target: "LeaveStatus") -> bool:
        return target in LEAVE_TRANSITIONS[self]


# Requests in these states block overlapping applications and count as used days.
ACTIVE_LEAVE_STATUSES = frozenset({LeaveStatus.PENDING, LeaveStatus.APPROVED})

LEAVE_TRANSITIONS: dict[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.PENDING: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELED}),
    LeaveStatus.APPROVED: frozenset({LeaveStatus.CANCELED}),
    LeaveStatus.REJECTED: frozenset(),
    LeaveStatus.CANCELED: frozenset(),
}
