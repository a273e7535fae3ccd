from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_decimal, normalize_mysql_time
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, work_date, clock_in, clock_out,
    status, working_hours, created_at, updated_at
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        clock_in=normalize_mysql_time(r.get("clock_in")),
        clock_out=normalize_mysql_time(r.get("clock_out")),
        status=AttendanceStatus(r["status"]),
        working_hours=normalize_decimal(r.get("working_hours")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    """Upserts rely on the ``uq_attendance_employee_date`` unique key.

    ``attendance_id=LAST_INSERT_ID(attendance_id)`` makes ``lastrowid`` report
    the existing row's id when the insert turns into an update.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, where: str, params: tuple, *, suffix: str = "ORDER BY work_date DESC, attendance_id DESC"):
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE {where} {suffix}", params)
            return [_to_record(r) for r in fetchall(cur)]

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def upsert_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in: time,
        status: AttendanceStatus,
        working_hours: Optional[Decimal] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            # New rows never carry hours; existing rows get them recomputed for the new clock-in.
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, clock_in, status)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    clock_in=VALUES(clock_in),
                    working_hours=%s,
                    attendance_id=LAST_INSERT_ID(attendance_id)
                """,
                (int(employee_id), work_date, clock_in, status.value, working_hours),
            )
            return int(cur.lastrowid)

    def upsert_status(self, *, employee_id: int, work_date: date, status: AttendanceStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, status)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    attendance_id=LAST_INSERT_ID(attendance_id)
                """,
                (int(employee_id), work_date, status.value),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, clock_in, clock_out, status, working_hours)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    clock_in=VALUES(clock_in),
                    clock_out=VALUES(clock_out),
                    status=VALUES(status),
                    working_hours=VALUES(working_hours),
                    attendance_id=LAST_INSERT_ID(attendance_id)
                """,
                (int(employee_id), work_date, clock_in, clock_out, status.value, working_hours),
            )
            return int(cur.lastrowid)

    def update_clock_out(
        self,
        *,
        attendance_id: int,
        clock_out: time,
        working_hours: Optional[Decimal],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_out=%s, working_hours=%s
                WHERE attendance_id=%s
                """,
                (clock_out, working_hours, int(attendance_id)),
            )
            return cur.rowcount > 0

    def update_status(self, *, attendance_id: int, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET status=%s WHERE attendance_id=%s",
                (status.value, int(attendance_id)),
            )
            # Same-value updates report 0 affected rows in MySQL.
            return cur.rowcount > 0 or self._exists(cur, attendance_id)

    @staticmethod
    def _exists(cur, attendance_id: int) -> bool:
        cur.execute("SELECT 1 AS found FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
        return fetchone(cur) is not None

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def list_all(self, *, limit: int) -> Sequence[AttendanceRecord]:
        return self._select("1=1", (int(limit),), suffix="ORDER BY work_date DESC, attendance_id DESC LIMIT %s")

    def list_for_employee(self, employee_id: int) -> Sequence[AttendanceRecord]:
        return self._select("employee_id=%s", (int(employee_id),))

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        return self._select("work_date=%s", (work_date,), suffix="ORDER BY employee_id ASC")

    def list_for_employee_between(
        self, employee_id: int, start_date: date, end_date: date
    ) -> Sequence[AttendanceRecord]:
        return self._select(
            "employee_id=%s AND work_date BETWEEN %s AND %s",
            (int(employee_id), start_date, end_date),
        )

    def list_for_employee_and_status(
        self, employee_id: int, status: AttendanceStatus
    ) -> Sequence[AttendanceRecord]:
        return self._select("employee_id=%s AND status=%s", (int(employee_id), status.value))
