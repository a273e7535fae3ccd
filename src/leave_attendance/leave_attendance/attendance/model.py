from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    attendance_id: int
    employee_id: int
    work_date: date
    clock_in: Optional[time]
    clock_out: Optional[time]
    status: AttendanceStatus
    working_hours: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "employee_id": self.employee_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "clock_in": self.clock_in.strftime("%H:%M:%S") if self.clock_in else None,
            "clock_out": self.clock_out.strftime("%H:%M:%S") if self.clock_out else None,
            "status": self.status.value,
            "working_hours": str(self.working_hours) if self.working_hours is not None else None,
        }
