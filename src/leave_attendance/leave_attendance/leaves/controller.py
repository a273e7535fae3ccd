from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.responses import json_body, ok
from ..common.validators import require_positive_id
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    def _as_list(requests_):
        return [r.to_dict() for r in requests_]

    @app.route("/api/leaves", methods=["GET"], endpoint="leave_list")
    def leave_list():
        status = request.args.get("status")
        if status:
            return ok(_as_list(service.list_by_status(status)))
        return ok(_as_list(service.list_all()))

    @app.route("/api/leaves", methods=["POST"], endpoint="leave_apply")
    def leave_apply():
        payload = json_body()
        leave = service.apply(
            payload.get("employee_id"),
            payload.get("leave_type"),
            parse_iso_date(payload.get("start_date")),
            parse_iso_date(payload.get("end_date")),
            payload.get("reason"),
        )
        return ok(leave.to_dict(), 201)

    @app.route("/api/leaves/<int:request_id>", methods=["GET"], endpoint="leave_get")
    def leave_get(request_id: int):
        return ok(service.get(request_id).to_dict())

    @app.route("/api/leaves/<int:request_id>", methods=["DELETE"], endpoint="leave_delete")
    def leave_delete(request_id: int):
        service.delete(request_id)
        return "", 204

    @app.route("/api/leaves/<int:request_id>/approve", methods=["POST"], endpoint="leave_approve")
    def leave_approve(request_id: int):
        approver_id = require_positive_id(json_body().get("approver_id"), "approver_id")
        return ok(service.approve(request_id, approver_id).to_dict())

    @app.route("/api/leaves/<int:request_id>/reject", methods=["POST"], endpoint="leave_reject")
    def leave_reject(request_id: int):
        reviewer_id = require_positive_id(json_body().get("approver_id"), "approver_id")
        return ok(service.reject(request_id, reviewer_id).to_dict())

    @app.route("/api/leaves/<int:request_id>/cancel", methods=["POST"], endpoint="leave_cancel")
    def leave_cancel(request_id: int):
        return ok(service.cancel(request_id).to_dict())

    @app.route("/api/leaves/employee/<int:employee_id>", methods=["GET"], endpoint="leave_for_employee")
    def leave_for_employee(employee_id: int):
        return ok(_as_list(service.list_for_employee(employee_id)))

    @app.route("/api/leaves/employee/<int:employee_id>/used-days", methods=["GET"], endpoint="leave_used_days")
    def leave_used_days(employee_id: int):
        leave_type = request.args.get("type", "")
        try:
            year = int(request.args.get("year", ""))
        except ValueError:
            raise ValidationError("year must be an integer") from None
        days = service.used_leave_days(employee_id, leave_type, year)
        return ok({"employee_id": employee_id, "leave_type": leave_type.upper(), "year": year, "used_days": days})

    @app.route("/api/leaves/employee/<int:employee_id>/overlap", methods=["GET"], endpoint="leave_overlap")
    def leave_overlap(employee_id: int):
        start = parse_iso_date(request.args.get("start") or "")
        end = parse_iso_date(request.args.get("end") or "")
        return ok({"overlap": service.has_overlap(employee_id, start, end)})

    @app.route("/api/leaves/date/<day>", methods=["GET"], endpoint="leave_for_date")
    def leave_for_date(day: str):
        return ok(_as_list(service.list_for_date(parse_iso_date(day))))
