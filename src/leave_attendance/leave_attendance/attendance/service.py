from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_ordered_dates, require_positive_id
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import NoClockInFound, NotFound, StorageError
from .calculator import ClockDifferenceCalculator, WorkingHoursCalculator
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Upsert-by-date attendance tracking.

    Each (employee, date) has at most one record. The status is a free label:
    any status may be overwritten by any other.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: WorkingHoursCalculator | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._calculator = calculator or ClockDifferenceCalculator()
        self._clock = clock

    def _resolve(self, work_date: date | None, at: time | None) -> tuple[date, time]:
        now = self._clock()
        return work_date or now.date(), at or now.time().replace(microsecond=0)

    def _reload(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if record is None:
            # The row was written in this call; losing it means a concurrent delete.
            raise StorageError(f"Attendance record {attendance_id} vanished after write")
        return record

    def get(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if record is None:
            raise NotFound(f"Attendance record {attendance_id} not found")
        return record

    def clock_in(self, employee_id: int, work_date: date | None = None, at: time | None = None) -> AttendanceRecord:
        """Create the day's record as PRESENT if missing; clock-in is last write wins.

        If the day already has a clock-out, working hours are recomputed against
        the new clock-in, and a clock-in after that clock-out is rejected.
        """
        employee_id = require_positive_id(employee_id, "Employee id")
        work_date, at = self._resolve(work_date, at)

        hours = None
        existing = self._attendance.get_for_employee_and_date(employee_id, work_date)
        if existing is not None and existing.clock_out is not None:
            hours = self._calculator.working_hours(work_date=work_date, clock_in=at, clock_out=existing.clock_out)

        attendance_id = self._attendance.upsert_clock_in(
            employee_id=employee_id,
            work_date=work_date,
            clock_in=at,
            status=AttendanceStatus.PRESENT,
            working_hours=hours,
        )
        logger.info("Clock-in employee=%s date=%s at=%s", employee_id, work_date, at)
        return self._reload(attendance_id)

    def clock_out(self, employee_id: int, work_date: date | None = None, at: time | None = None) -> AttendanceRecord:
        employee_id = require_positive_id(employee_id, "Employee id")
        work_date, at = self._resolve(work_date, at)
        record = self._attendance.get_for_employee_and_date(employee_id, work_date)
        if record is None:
            logger.warning("Clock-out without record employee=%s date=%s", employee_id, work_date)
            raise NoClockInFound(f"No clock-in record found for employee {employee_id} on {work_date.isoformat()}")

        hours = None
        if record.clock_in is not None:
            hours = self._calculator.working_hours(work_date=work_date, clock_in=record.clock_in, clock_out=at)

        self._attendance.update_clock_out(attendance_id=record.attendance_id, clock_out=at, working_hours=hours)
        logger.info("Clock-out employee=%s date=%s at=%s hours=%s", employee_id, work_date, at, hours)
        return self._reload(record.attendance_id)

    def record_manual(
        self,
        employee_id: int,
        work_date: date,
        *,
        clock_in: Optional[time] = None,
        clock_out: Optional[time] = None,
        status: AttendanceStatus = AttendanceStatus.PRESENT,
    ) -> AttendanceRecord:
        """Write a whole day at once (admin entry), replacing what was there."""
        employee_id = require_positive_id(employee_id, "Employee id")
        hours = None
        if clock_in is not None and clock_out is not None:
            hours = self._calculator.working_hours(work_date=work_date, clock_in=clock_in, clock_out=clock_out)

        attendance_id = self._attendance.upsert_record(
            employee_id=employee_id,
            work_date=work_date,
            clock_in=clock_in,
            clock_out=clock_out,
            status=status,
            working_hours=hours,
        )
        logger.info("Manual attendance employee=%s date=%s status=%s", employee_id, work_date, status.value)
        return self._reload(attendance_id)

    def update_status(self, attendance_id: int, status: AttendanceStatus | str) -> AttendanceRecord:
        if not isinstance(status, AttendanceStatus):
            status = AttendanceStatus.parse(status)
        if not self._attendance.update_status(attendance_id=int(attendance_id), status=status):
            raise NotFound(f"Attendance record {attendance_id} not found")
        logger.info("Attendance %s status -> %s", attendance_id, status.value)
        return self._reload(int(attendance_id))

    def mark_absent(self, employee_id: int, work_date: date) -> AttendanceRecord:
        """Set the day to ABSENT, creating it if needed.

        Existing clock times are kept, so a day can read ABSENT with times
        filled in. Callers that must not overwrite a worked day check
        :meth:`has_attendance_for_date` first.
        """
        employee_id = require_positive_id(employee_id, "Employee id")
        attendance_id = self._attendance.upsert_status(
            employee_id=employee_id,
            work_date=work_date,
            status=AttendanceStatus.ABSENT,
        )
        logger.info("Marked absent employee=%s date=%s", employee_id, work_date)
        return self._reload(attendance_id)

    def has_attendance_for_date(self, employee_id: int, work_date: date) -> bool:
        return self._attendance.get_for_employee_and_date(int(employee_id), work_date) is not None

    def delete(self, attendance_id: int) -> bool:
        deleted = self._attendance.delete(int(attendance_id))
        if deleted:
            logger.info("Deleted attendance %s", attendance_id)
        return deleted

    def list_all(self, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.list_all(limit=int(limit))

    def list_for_employee(self, employee_id: int) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_employee(int(employee_id))

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_date(work_date)

    def list_for_employee_between(self, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        require_ordered_dates(start_date, end_date)
        return self._attendance.list_for_employee_between(int(employee_id), start_date, end_date)

    def list_for_employee_and_status(
        self, employee_id: int, status: AttendanceStatus | str
    ) -> Sequence[AttendanceRecord]:
        if not isinstance(status, AttendanceStatus):
            status = AttendanceStatus.parse(status)
        return self._attendance.list_for_employee_and_status(int(employee_id), status)
