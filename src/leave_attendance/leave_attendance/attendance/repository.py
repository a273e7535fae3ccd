from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Store for attendance records. ``(employee_id, work_date)`` is unique."""

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in: time,
        status: AttendanceStatus,
        working_hours: Optional[Decimal] = None,
    ) -> int:
        """Insert with ``status`` or, if the day exists, overwrite clock-in and working hours."""

        raise NotImplementedError

    def upsert_status(self, *, employee_id: int, work_date: date, status: AttendanceStatus) -> int:
        """Insert without clock times or overwrite only the status."""

        raise NotImplementedError

    def upsert_record(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in: Optional[time],
        clock_out: Optional[time],
        status: AttendanceStatus,
        working_hours: Optional[Decimal],
    ) -> int:
        raise NotImplementedError

    def update_clock_out(
        self,
        *,
        attendance_id: int,
        clock_out: time,
        working_hours: Optional[Decimal],
    ) -> bool:
        raise NotImplementedError

    def update_status(self, *, attendance_id: int, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def list_all(self, *, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee_between(
        self, employee_id: int, start_date: date, end_date: date
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee_and_status(
        self, employee_id: int, status: AttendanceStatus
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
