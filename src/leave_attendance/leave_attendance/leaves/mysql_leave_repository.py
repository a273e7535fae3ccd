from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from ..core.enums import ACTIVE_LEAVE_STATUSES, LeaveStatus
from ..core.exceptions import StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = """
    request_id, employee_id, leave_type, start_date, end_date, total_days,
    reason, status, approver_id, decided_at, created_at
"""

_ACTIVE_PLACEHOLDERS, _ACTIVE_VALUES = in_clause(sorted(s.value for s in ACTIVE_LEAVE_STATUSES))


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=r["leave_type"],
        start_date=r["start_date"],
        end_date=r["end_date"],
        total_days=int(r["total_days"]),
        reason=r.get("reason"),
        status=LeaveStatus(r["status"]),
        approver_id=int(r["approver_id"]) if r.get("approver_id") is not None else None,
        decided_at=r.get("decided_at"),
        created_at=r.get("created_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS):
        self._conn_factory = conn_factory
        self._lock_timeout = int(lock_timeout)

    def _select(self, where: str, params: tuple, *, suffix: str = "ORDER BY start_date DESC, request_id DESC"):
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE {where} {suffix}", params)
            return [_to_request(r) for r in fetchall(cur)]

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

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
        lock_name = f"leave_requests:employee:{int(employee_id)}"
        with db_cursor(self._conn_factory) as (conn, cur):
            # Named lock serializes applications of one employee across processes.
            cur.execute("SELECT GET_LOCK(%s, %s) AS acquired", (lock_name, self._lock_timeout))
            row = fetchone(cur)
            if not row or int(row["acquired"] or 0) != 1:
                raise StorageError(f"Could not acquire {lock_name}")
            try:
                cur.execute(
                    f"""
                    INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, total_days, reason, status)
                    SELECT %s,%s,%s,%s,%s,%s,%s FROM DUAL
                    WHERE NOT EXISTS (
                        SELECT 1 FROM leave_requests
                        WHERE employee_id=%s
                          AND status IN ({_ACTIVE_PLACEHOLDERS})
                          AND start_date <= %s
                          AND end_date >= %s
                    )
                    """,
                    (
                        int(employee_id),
                        leave_type,
                        start_date,
                        end_date,
                        int(total_days),
                        reason,
                        LeaveStatus.PENDING.value,
                        int(employee_id),
                        *_ACTIVE_VALUES,
                        end_date,
                        start_date,
                    ),
                )
                if cur.rowcount == 0:
                    return None
                request_id = int(cur.lastrowid)
                # The row must be visible to other sessions before the lock is released.
                conn.commit()
                return request_id
            finally:
                cur.execute("SELECT RELEASE_LOCK(%s) AS released", (lock_name,))
                fetchone(cur)

    def find_active_overlapping(self, employee_id: int, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        return self._select(
            f"employee_id=%s AND status IN ({_ACTIVE_PLACEHOLDERS}) AND start_date <= %s AND end_date >= %s",
            (int(employee_id), *_ACTIVE_VALUES, end_date, start_date),
            suffix="ORDER BY start_date ASC",
        )

    def update_status(
        self,
        *,
        request_id: int,
        expected: LeaveStatus,
        status: LeaveStatus,
        approver_id: Optional[int],
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approver_id=COALESCE(%s, approver_id), decided_at=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    approver_id,
                    decided_at,
                    int(request_id),
                    expected.value,
                ),
            )
            return cur.rowcount > 0

    def delete(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE request_id=%s", (int(request_id),))
            return cur.rowcount > 0

    def list_all(self, *, limit: int) -> Sequence[LeaveRequest]:
        return self._select("1=1", (int(limit),), suffix="ORDER BY created_at DESC, request_id DESC LIMIT %s")

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        return self._select("employee_id=%s", (int(employee_id),))

    def list_by_status(self, status: LeaveStatus, *, limit: int) -> Sequence[LeaveRequest]:
        return self._select(
            "status=%s",
            (status.value, int(limit)),
            suffix="ORDER BY created_at DESC, request_id DESC LIMIT %s",
        )

    def list_for_date(self, day: date) -> Sequence[LeaveRequest]:
        return self._select("start_date <= %s AND end_date >= %s", (day, day))
