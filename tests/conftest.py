from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

import pytest

from leave_attendance.attendance.model import AttendanceRecord
from leave_attendance.attendance.service import AttendanceService
from leave_attendance.core.enums import ACTIVE_LEAVE_STATUSES, AttendanceStatus, LeaveStatus
from leave_attendance.leaves.model import LeaveRequest
from leave_attendance.leaves.service import LeaveService

FIXED_NOW = datetime(2024, 3, 4, 9, 15, 0)


class InMemoryAttendance:
    """Dict-backed attendance store; one row per (employee_id, work_date)."""

    def __init__(self):
        self._rows: dict[int, AttendanceRecord] = {}
        self._id = 0

    def _find(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        for r in self._rows.values():
            if r.employee_id == employee_id and r.work_date == work_date:
                return r
        return None

    def _insert(self, **fields) -> int:
        self._id += 1
        self._rows[self._id] = AttendanceRecord(attendance_id=self._id, **fields)
        return self._id

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._rows.get(attendance_id)

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._find(employee_id, work_date)

    def upsert_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in: time,
        status: AttendanceStatus,
        working_hours: Optional[Decimal] = None,
    ) -> int:
        existing = self._find(employee_id, work_date)
        if existing:
            self._rows[existing.attendance_id] = replace(existing, clock_in=clock_in, working_hours=working_hours)
            return existing.attendance_id
        return self._insert(
            employee_id=employee_id, work_date=work_date, clock_in=clock_in, clock_out=None, status=status
        )

    def upsert_status(self, *, employee_id: int, work_date: date, status: AttendanceStatus) -> int:
        existing = self._find(employee_id, work_date)
        if existing:
            self._rows[existing.attendance_id] = replace(existing, status=status)
            return existing.attendance_id
        return self._insert(employee_id=employee_id, work_date=work_date, clock_in=None, clock_out=None, status=status)

    def upsert_record(self, *, employee_id, work_date, clock_in, clock_out, status, working_hours) -> int:
        existing = self._find(employee_id, work_date)
        if existing:
            self._rows[existing.attendance_id] = replace(
                existing, clock_in=clock_in, clock_out=clock_out, status=status, working_hours=working_hours
            )
            return existing.attendance_id
        return self._insert(
            employee_id=employee_id,
            work_date=work_date,
            clock_in=clock_in,
            clock_out=clock_out,
            status=status,
            working_hours=working_hours,
        )

    def update_clock_out(self, *, attendance_id: int, clock_out: time, working_hours: Optional[Decimal]) -> bool:
        rec = self._rows.get(attendance_id)
        if not rec:
            return False
        self._rows[attendance_id] = replace(rec, clock_out=clock_out, working_hours=working_hours)
        return True

    def update_status(self, *, attendance_id: int, status: AttendanceStatus) -> bool:
        rec = self._rows.get(attendance_id)
        if not rec:
            return False
        self._rows[attendance_id] = replace(rec, status=status)
        return True

    def delete(self, attendance_id: int) -> bool:
        return self._rows.pop(attendance_id, None) is not None

    def list_all(self, *, limit: int):
        return sorted(self._rows.values(), key=lambda r: r.work_date, reverse=True)[:limit]

    def list_for_employee(self, employee_id: int):
        return [r for r in self._rows.values() if r.employee_id == employee_id]

    def list_for_date(self, work_date: date):
        return [r for r in self._rows.values() if r.work_date == work_date]

    def list_for_employee_between(self, employee_id: int, start_date: date, end_date: date):
        return [
            r for r in self._rows.values()
            if r.employee_id == employee_id and start_date <= r.work_date <= end_date
        ]

    def list_for_employee_and_status(self, employee_id: int, status: AttendanceStatus):
        return [r for r in self._rows.values() if r.employee_id == employee_id and r.status == status]


class InMemoryLeaves:
    """Dict-backed leave store with the same conditional insert as the SQL one."""

    def __init__(self):
        self._rows: dict[int, LeaveRequest] = {}
        self._id = 0
        self.create_calls = 0

    def seed(self, *, employee_id, leave_type, start_date, end_date, status=LeaveStatus.PENDING) -> LeaveRequest:
        self._id += 1
        req = LeaveRequest(
            request_id=self._id,
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            total_days=(end_date - start_date).days + 1,
            reason=None,
            status=status,
        )
        self._rows[self._id] = req
        return req

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        return self._rows.get(request_id)

    def find_active_overlapping(self, employee_id: int, start_date: date, end_date: date):
        return [
            r for r in self._rows.values()
            if r.employee_id == employee_id
            and r.status in ACTIVE_LEAVE_STATUSES
            and r.start_date <= end_date
            and start_date <= r.end_date
        ]

    def create_if_no_overlap(self, *, employee_id, leave_type, start_date, end_date, total_days, reason):
        self.create_calls += 1
        if self.find_active_overlapping(employee_id, start_date, end_date):
            return None
        self._id += 1
        self._rows[self._id] = LeaveRequest(
            request_id=self._id,
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days,
            reason=reason,
            status=LeaveStatus.PENDING,
            created_at=FIXED_NOW,
        )
        return self._id

    def update_status(self, *, request_id, expected, status, approver_id, decided_at) -> bool:
        req = self._rows.get(request_id)
        if not req or req.status != expected:
            return False
        self._rows[request_id] = replace(
            req,
            status=status,
            approver_id=approver_id if approver_id is not None else req.approver_id,
            decided_at=decided_at,
        )
        return True

    def delete(self, request_id: int) -> bool:
        return self._rows.pop(request_id, None) is not None

    def list_all(self, *, limit: int):
        return list(self._rows.values())[:limit]

    def list_for_employee(self, employee_id: int):
        return [r for r in self._rows.values() if r.employee_id == employee_id]

    def list_by_status(self, status: LeaveStatus, *, limit: int):
        return [r for r in self._rows.values() if r.status == status][:limit]

    def list_for_date(self, day: date):
        return [r for r in self._rows.values() if r.start_date <= day <= r.end_date]


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def attendance_service(attendance_repo, fixed_now) -> AttendanceService:
    return AttendanceService(attendance_repo, clock=lambda: fixed_now)


@pytest.fixture
def leaves_repo() -> InMemoryLeaves:
    return InMemoryLeaves()


@pytest.fixture
def leave_service(leaves_repo, fixed_now) -> LeaveService:
    return LeaveService(leaves_repo, clock=lambda: fixed_now)
