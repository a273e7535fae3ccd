from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest

from leave_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from leave_attendance.core.enums import AttendanceStatus, LeaveStatus
from leave_attendance.core.exceptions import StorageError
from leave_attendance.leaves.mysql_leave_repository import MySQLLeaveRepository


class RecordingCursor:
    """Records statements and replays canned results in order."""

    def __init__(self, results=(), rowcounts=(), lastrowid=None):
        self.statements = []
        self.events = []
        self._results = list(results)
        self._rowcounts = list(rowcounts)
        self.rowcount = 0
        self.lastrowid = lastrowid

    def execute(self, sql, params=()):
        self.statements.append((" ".join(sql.split()), tuple(params)))
        self.events.append(self.statements[-1][0])
        if self._rowcounts:
            self.rowcount = self._rowcounts.pop(0)

    def _next(self):
        return self._results.pop(0) if self._results else None

    def fetchone(self):
        return self._next()

    def fetchall(self):
        return self._next() or []

    def close(self):
        pass


class OneShotFactory:
    def __init__(self, cursor):
        self.cursor = cursor
        self.committed = False

    def connect(self):
        factory = self

        class _Conn:
            def cursor(self, dictionary=True):
                return factory.cursor

            def commit(self):
                factory.committed = True
                factory.cursor.events.append("COMMIT")

            def rollback(self):
                pass

            def close(self):
                pass

        return _Conn()


def _sql(cur, index):
    return cur.statements[index][0]


def test_leave_insert_is_conditional_and_commits_before_releasing_lock():
    cur = RecordingCursor(results=[{"acquired": 1}, {"released": 1}], rowcounts=[1, 1, 1], lastrowid=17)
    repo = MySQLLeaveRepository(OneShotFactory(cur), lock_timeout=3)

    request_id = repo.create_if_no_overlap(
        employee_id=5,
        leave_type="VACATION",
        start_date=date(2024, 1, 10),
        end_date=date(2024, 1, 15),
        total_days=6,
        reason=None,
    )

    assert request_id == 17
    assert _sql(cur, 0).startswith("SELECT GET_LOCK")
    assert cur.statements[0][1] == ("leave_requests:employee:5", 3)
    assert "WHERE NOT EXISTS" in _sql(cur, 1)
    assert cur.statements[1][1][-4:] == ("APPROVED", "PENDING", date(2024, 1, 15), date(2024, 1, 10))
    assert _sql(cur, 2).startswith("SELECT RELEASE_LOCK")
    assert cur.events[2] == "COMMIT"
    assert cur.events[3].startswith("SELECT RELEASE_LOCK")


def test_leave_insert_returns_none_when_blocked():
    cur = RecordingCursor(results=[{"acquired": 1}, {"released": 1}], rowcounts=[1, 0, 1])
    repo = MySQLLeaveRepository(OneShotFactory(cur))

    assert repo.create_if_no_overlap(
        employee_id=5,
        leave_type="VACATION",
        start_date=date(2024, 1, 15),
        end_date=date(2024, 1, 20),
        total_days=6,
        reason=None,
    ) is None
    assert _sql(cur, -1).startswith("SELECT RELEASE_LOCK")
    assert "COMMIT" not in cur.events[:-1]


def test_leave_insert_fails_when_lock_times_out():
    cur = RecordingCursor(results=[{"acquired": 0}])
    repo = MySQLLeaveRepository(OneShotFactory(cur))

    with pytest.raises(StorageError):
        repo.create_if_no_overlap(
            employee_id=5,
            leave_type="VACATION",
            start_date=date(2024, 1, 15),
            end_date=date(2024, 1, 20),
            total_days=6,
            reason=None,
        )
    assert len(cur.statements) == 1


def test_leave_status_update_is_compare_and_set():
    cur = RecordingCursor(rowcounts=[0])
    repo = MySQLLeaveRepository(OneShotFactory(cur))

    assert not repo.update_status(
        request_id=3,
        expected=LeaveStatus.PENDING,
        status=LeaveStatus.APPROVED,
        approver_id=9,
        decided_at=datetime(2024, 1, 1, 12, 0),
    )
    sql, params = cur.statements[0]
    assert "WHERE request_id=%s AND status=%s" in sql
    assert "COALESCE(%s, approver_id)" in sql
    assert params == ("APPROVED", 9, datetime(2024, 1, 1, 12, 0), 3, "PENDING")


def test_leave_rows_map_to_requests():
    row = {
        "request_id": 1,
        "employee_id": 2,
        "leave_type": "SICK",
        "start_date": date(2024, 1, 1),
        "end_date": date(2024, 1, 2),
        "total_days": 2,
        "reason": None,
        "status": "APPROVED",
        "approver_id": 4,
        "decided_at": None,
        "created_at": None,
    }
    cur = RecordingCursor(results=[[row]])
    repo = MySQLLeaveRepository(OneShotFactory(cur))

    [req] = repo.list_for_date(date(2024, 1, 2))
    assert req.status is LeaveStatus.APPROVED
    assert req.approver_id == 4
    assert cur.statements[0][1] == (date(2024, 1, 2), date(2024, 1, 2))


def test_attendance_upsert_returns_row_id():
    cur = RecordingCursor(rowcounts=[2], lastrowid=11)
    factory = OneShotFactory(cur)
    repo = MySQLAttendanceRepository(factory)

    attendance_id = repo.upsert_clock_in(
        employee_id=1,
        work_date=date(2024, 3, 4),
        clock_in=time(9, 0),
        status=AttendanceStatus.PRESENT,
    )

    assert attendance_id == 11
    assert factory.committed
    sql = _sql(cur, 0)
    assert "ON DUPLICATE KEY UPDATE" in sql
    assert "LAST_INSERT_ID(attendance_id)" in sql
    assert "working_hours=%s" in sql
    assert cur.statements[0][1] == (1, date(2024, 3, 4), time(9, 0), "PRESENT", None)


def test_attendance_status_update_counts_unchanged_rows_as_found():
    cur = RecordingCursor(results=[{"found": 1}], rowcounts=[0, 1])
    repo = MySQLAttendanceRepository(OneShotFactory(cur))

    assert repo.update_status(attendance_id=8, status=AttendanceStatus.LATE)
    assert len(cur.statements) == 2


def test_attendance_rows_normalize_time_and_hours():
    row = {
        "attendance_id": 1,
        "employee_id": 2,
        "work_date": date(2024, 3, 4),
        "clock_in": timedelta(hours=9),
        "clock_out": "17:30:00",
        "status": "PRESENT",
        "working_hours": 8.5,
        "created_at": None,
        "updated_at": None,
    }
    cur = RecordingCursor(results=[row])
    repo = MySQLAttendanceRepository(OneShotFactory(cur))

    record = repo.get_for_employee_and_date(2, date(2024, 3, 4))
    assert record.clock_in == time(9, 0)
    assert record.clock_out == time(17, 30)
    assert record.working_hours == Decimal("8.5")
