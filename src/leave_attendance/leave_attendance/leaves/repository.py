from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def create_if_no_overlap(
        self,
        *,
        employee_id: int,
        leave_type: str,
        start_date: date,
        end_date: date,
        total_days: int,
        reason: Optional[str],
    ) -> Optional[int]:
        """Insert a PENDING request unless an active one of the employee overlaps.

        The check and the insert are one atomic step at the store. Returns the
        new id, or ``None`` when an overlapping active request exists.
        """

        raise NotImplementedError

    def find_active_overlapping(self, employee_id: int, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        """PENDING/APPROVED requests of the employee touching ``[start_date, end_date]``."""

        raise NotImplementedError

    def update_status(
        self,
        *,
        request_id: int,
        expected: LeaveStatus,
        status: LeaveStatus,
        approver_id: Optional[int],
        decided_at: datetime,
    ) -> bool:
        """Compare-and-set: only updates while the row still has ``expected`` status.

        ``approver_id=None`` leaves the stored approver untouched.
        """

        raise NotImplementedError

    def delete(self, request_id: int) -> bool:
        raise NotImplementedError

    def list_all(self, *, limit: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_by_status(self, status: LeaveStatus, *, limit: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_for_date(self, day: date) -> Sequence[LeaveRequest]:
        raise NotImplementedError
