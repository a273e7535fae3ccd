from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date, parse_optional_date, parse_optional_time
from ..common.responses import fail, json_body, ok
from ..common.validators import require_positive_id
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _as_list(records):
        return [r.to_dict() for r in records]

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    def attendance_list():
        return ok(_as_list(service.list_all()))

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_record")
    def attendance_record():
        payload = json_body()
        if "employee_id" not in payload or "date" not in payload:
            raise ValidationError("employee_id and date are required")
        status = payload.get("status")
        record = service.record_manual(
            require_positive_id(payload["employee_id"], "employee_id"),
            parse_iso_date(payload["date"]),
            clock_in=parse_optional_time(payload.get("clock_in")),
            clock_out=parse_optional_time(payload.get("clock_out")),
            status=AttendanceStatus.parse(status) if status else AttendanceStatus.PRESENT,
        )
        return ok(record.to_dict(), 201)

    @app.route("/api/attendance/<int:attendance_id>", methods=["GET"], endpoint="attendance_get")
    def attendance_get(attendance_id: int):
        return ok(service.get(attendance_id).to_dict())

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    def attendance_delete(attendance_id: int):
        if not service.delete(attendance_id):
            return fail(f"Attendance record {attendance_id} not found", 404)
        return "", 204

    @app.route(
        "/api/attendance/<int:attendance_id>/status/<status>",
        methods=["PUT"],
        endpoint="attendance_update_status",
    )
    def attendance_update_status(attendance_id: int, status: str):
        return ok(service.update_status(attendance_id, status).to_dict())

    @app.route("/api/attendance/employee/<int:employee_id>", methods=["GET"], endpoint="attendance_for_employee")
    def attendance_for_employee(employee_id: int):
        start = parse_optional_date(request.args.get("start"))
        end = parse_optional_date(request.args.get("end"))
        status = request.args.get("status")

        if start or end:
            if not (start and end):
                raise ValidationError("start and end must be given together")
            records = service.list_for_employee_between(employee_id, start, end)
        elif status:
            records = service.list_for_employee_and_status(employee_id, status)
        else:
            records = service.list_for_employee(employee_id)
        return ok(_as_list(records))

    @app.route("/api/attendance/date/<day>", methods=["GET"], endpoint="attendance_for_date")
    def attendance_for_date(day: str):
        return ok(_as_list(service.list_for_date(parse_iso_date(day))))

    @app.route("/api/attendance/employee/<int:employee_id>/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    def attendance_clock_in(employee_id: int):
        record = service.clock_in(
            employee_id,
            parse_optional_date(request.args.get("date")),
            parse_optional_time(request.args.get("time")),
        )
        return ok(record.to_dict())

    @app.route("/api/attendance/employee/<int:employee_id>/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    def attendance_clock_out(employee_id: int):
        record = service.clock_out(
            employee_id,
            parse_optional_date(request.args.get("date")),
            parse_optional_time(request.args.get("time")),
        )
        return ok(record.to_dict())

    @app.route(
        "/api/attendance/employee/<int:employee_id>/mark-absent",
        methods=["POST"],
        endpoint="attendance_mark_absent",
    )
    def attendance_mark_absent(employee_id: int):
        work_date = parse_iso_date(request.args.get("date") or "")
        # Never silently turn a recorded day into an absence from the API.
        if service.has_attendance_for_date(employee_id, work_date):
            return fail(f"Attendance already recorded for {work_date.isoformat()}", 409)
        return ok(service.mark_absent(employee_id, work_date).to_dict())
