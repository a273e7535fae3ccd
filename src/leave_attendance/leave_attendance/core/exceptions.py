from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidInterval(ValidationError):
    """Raised when a date or time range ends before it starts."""


class NoClockInFound(ValidationError):
    """Raised on clock-out when the employee has no record for that day."""


class NotFound(DomainError):
    """Raised when a referenced record does not exist."""


class InvalidStateTransition(DomainError):
    """Raised when a leave request cannot move from its current status."""

    def __init__(self, message: str, *, current=None, target=None):
        super().__init__(message)
        self.current = current
        self.target = target


class OverlappingLeave(DomainError):
    """Raised when a leave interval intersects an active request of the same employee."""

    def __init__(self, message: str, *, conflicting_ids: Sequence[int] = ()):
        super().__init__(message)
        self.conflicting_ids = tuple(conflicting_ids)


class StorageError(Exception):
    """Raised when the record store fails. Not recoverable at this layer."""
