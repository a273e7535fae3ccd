from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.intervals import DateInterval
from ..common.locks import KeyedLock
from ..common.validators import optional_text, require_non_empty, require_positive_id
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import LeaveStatus
from ..core.exceptions import InvalidStateTransition, NotFound, OverlappingLeave, StorageError
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave request workflow.

    ``PENDING -> APPROVED | REJECTED | CANCELED`` and ``APPROVED -> CANCELED``;
    REJECTED and CANCELED are final. Active (PENDING/APPROVED) requests of one
    employee never overlap, bounds inclusive.
    """

    def __init__(
        self,
        leaves: LeaveRepository,
        *,
        locks: KeyedLock | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._leaves = leaves
        self._locks = locks or KeyedLock()
        self._clock = clock

    @staticmethod
    def _normalize_type(leave_type: str) -> str:
        return require_non_empty(leave_type, "Leave type").upper()

    def _active_conflicts(self, employee_id: int, interval: DateInterval) -> list[LeaveRequest]:
        candidates = self._leaves.find_active_overlapping(employee_id, interval.start, interval.end)
        return [r for r in candidates if r.status.is_active and r.interval.overlaps(interval)]

    def get(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get_by_id(int(request_id))
        if req is None:
            raise NotFound(f"Leave request {request_id} not found")
        return req

    def has_overlap(self, employee_id: int, start_date: date, end_date: date) -> bool:
        return bool(self._active_conflicts(int(employee_id), DateInterval(start_date, end_date)))

    def apply(
        self,
        employee_id: int,
        leave_type: str,
        start_date: date,
        end_date: date,
        reason: Optional[str] = None,
    ) -> LeaveRequest:
        employee_id = require_positive_id(employee_id, "Employee id")
        interval = DateInterval(start_date, end_date)
        leave_type = self._normalize_type(leave_type)
        reason = optional_text(reason, "Reason")

        with self._locks.hold(employee_id):
            conflicts = self._active_conflicts(employee_id, interval)
            if conflicts:
                ids = [r.request_id for r in conflicts]
                logger.warning(
                    "Rejected overlapping leave employee=%s range=%s..%s conflicts=%s",
                    employee_id, interval.start, interval.end, ids,
                )
                raise OverlappingLeave(
                    "Employee already has approved/pending leave for this period",
                    conflicting_ids=ids,
                )

            request_id = self._leaves.create_if_no_overlap(
                employee_id=employee_id,
                leave_type=leave_type,
                start_date=interval.start,
                end_date=interval.end,
                total_days=interval.days,
                reason=reason,
            )
            if request_id is None:
                # Another process inserted an overlapping request after our check.
                logger.warning("Overlapping leave detected at store employee=%s", employee_id)
                raise OverlappingLeave("Employee already has approved/pending leave for this period")

        logger.info(
            "Leave %s applied employee=%s type=%s range=%s..%s days=%s",
            request_id, employee_id, leave_type, interval.start, interval.end, interval.days,
        )
        return self._reload(request_id)

    def _reload(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get_by_id(request_id)
        if req is None:
            raise StorageError(f"Leave request {request_id} vanished after write")
        return req

    def _transition(self, request_id: int, target: LeaveStatus, *, approver_id: Optional[int] = None) -> LeaveRequest:
        req = self.get(request_id)
        if not req.status.can_transition_to(target):
            logger.warning("Invalid leave transition %s: %s -> %s", req.request_id, req.status.value, target.value)
            raise InvalidStateTransition(
                f"Leave request {req.request_id} is {req.status.value} and cannot become {target.value}",
                current=req.status,
                target=target,
            )

        updated = self._leaves.update_status(
            request_id=req.request_id,
            expected=req.status,
            status=target,
            approver_id=approver_id,
            decided_at=self._clock(),
        )
        if not updated:
            current = self._leaves.get_by_id(req.request_id)
            if current is None:
                raise NotFound(f"Leave request {request_id} not found")
            raise InvalidStateTransition(
                f"Leave request {req.request_id} changed to {current.status.value} concurrently",
                current=current.status,
                target=target,
            )

        logger.info("Leave %s %s -> %s by %s", req.request_id, req.status.value, target.value, approver_id)
        return self._reload(req.request_id)

    def approve(self, request_id: int, approver_id: int) -> LeaveRequest:
        approver_id = require_positive_id(approver_id, "Approver id")
        return self._transition(request_id, LeaveStatus.APPROVED, approver_id=approver_id)

    def reject(self, request_id: int, reviewer_id: int) -> LeaveRequest:
        reviewer_id = require_positive_id(reviewer_id, "Reviewer id")
        return self._transition(request_id, LeaveStatus.REJECTED, approver_id=reviewer_id)

    def cancel(self, request_id: int) -> LeaveRequest:
        return self._transition(request_id, LeaveStatus.CANCELED)

    def delete(self, request_id: int) -> None:
        """Administrative removal, whatever the status."""
        if not self._leaves.delete(int(request_id)):
            raise NotFound(f"Leave request {request_id} not found")
        logger.info("Deleted leave request %s", request_id)

    def used_leave_days(self, employee_id: int, leave_type: str, year: int) -> int:
        """Days of active requests of ``leave_type`` touching calendar ``year``.

        A request spanning two years counts its full length in both.
        """
        leave_type = self._normalize_type(leave_type)
        active = self._active_conflicts(int(employee_id), DateInterval.for_year(int(year)))
        return sum(r.total_days for r in active if r.leave_type.upper() == leave_type)

    def list_all(self, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[LeaveRequest]:
        return self._leaves.list_all(limit=int(limit))

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_employee(int(employee_id))

    def list_by_status(self, status: LeaveStatus | str, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[LeaveRequest]:
        if not isinstance(status, LeaveStatus):
            status = LeaveStatus.parse(status)
        return self._leaves.list_by_status(status, limit=int(limit))

    def list_for_date(self, day: date) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_date(day)
