from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.locks import KeyedLock
from .core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    attendance_repo: MySQLAttendanceRepository
    leaves_repo: MySQLLeaveRepository

    attendance_service: AttendanceService
    leave_service: LeaveService


def build_container(*, db_config: dict, lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    attendance_repo = MySQLAttendanceRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn, lock_timeout=lock_timeout)

    attendance_service = AttendanceService(attendance_repo)
    leave_service = LeaveService(leaves_repo, locks=KeyedLock(timeout=lock_timeout))

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        attendance_service=attendance_service,
        leave_service=leave_service,
    )
