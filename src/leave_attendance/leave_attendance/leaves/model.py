from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.intervals import DateInterval
from ..core.enums import LeaveStatus


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    leave_type: str
    start_date: date
    end_date: date
    total_days: int
    reason: Optional[str]
    status: LeaveStatus
    approver_id: Optional[int] = None
    decided_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def interval(self) -> DateInterval:
        return DateInterval(self.start_date, self.end_date)

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "employee_id": self.employee_id,
            "leave_type": self.leave_type,
            "start_date": self.start_date.strftime("%Y-%m-%d"),
            "end_date": self.end_date.strftime("%Y-%m-%d"),
            "total_days": self.total_days,
            "reason": self.reason or "",
            "status": self.status.value,
            "approver_id": self.approver_id,
            "decided_at": self.decided_at.strftime("%Y-%m-%d %H:%M:%S") if self.decided_at else None,
        }
