from __future__ import annotations

from flask import Flask, request, session

from ..common.http import current_user_id, login_required, ok
from ..common.validators import require_non_empty
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, BadRequestError
from .model import ClockRequest


def register(app: Flask, container: Container) -> None:
    def _payload() -> dict:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    @login_required
    def clock_in():
        req = ClockRequest.from_payload(current_user_id(), _payload())
        result = container.clock_processor.clock_in(req)
        return ok(result.to_dict(), f"Clocked in for {result.session.value} session", 201)

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    @login_required
    def clock_out():
        req = ClockRequest.from_payload(current_user_id(), _payload())
        result = container.clock_processor.clock_out(req)
        return ok(result.to_dict(), f"Clocked out of {result.session.value} session")

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        practicum_id = require_non_empty(request.args.get("practicum_id"), "practicum_id")
        record = container.clock_processor.get_today_record(current_user_id(), practicum_id)
        return ok(record.to_dict() if record else None, "Today's attendance record retrieved")

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @login_required
    def stats():
        student_id = (request.args.get("student_id") or "").strip()
        if not student_id:
            raise BadRequestError("Student ID is required")
        if session.get("role") == Role.STUDENT.value and student_id != current_user_id():
            raise AuthorizationError("Students can only view their own attendance statistics")

        practicum_id = (request.args.get("practicum_id") or "").strip() or None
        summary = container.attendance_queries.stats(student_id, practicum_id=practicum_id)
        return ok(summary.to_dict(), "Attendance statistics retrieved")
