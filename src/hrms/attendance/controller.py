from __future__ import annotations

from datetime import timedelta

from flask import Flask, request

from ..common.datetime_utils import now_utc
from ..common.web import current_role, current_user_id, date_field, int_field, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/clockin", methods=["POST"], endpoint="api_clock_in")
    @login_required
    def clock_in():
        record = container.attendance_service.clock_in(current_user_id())
        return ok(record, message="Clocked in")

    @app.route("/api/attendance/clockout", methods=["POST"], endpoint="api_clock_out")
    @login_required
    def clock_out():
        record = container.attendance_service.clock_out(current_user_id())
        return ok(record, message="Clocked out")

    @app.route("/api/attendance/status", methods=["PUT"], endpoint="api_attendance_status")
    @login_required
    def set_status():
        data = json_body()
        record = container.attendance_service.set_status(
            current_role=current_role(),
            employee_id=int_field(data, "employee_id"),
            work_date=date_field(data, "date"),
            status=data.get("status"),
        )
        return ok(record, message="Attendance updated")

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance")
    @login_required
    def list_attendance():
        # Defaults to the last 31 days when no range is given.
        today = now_utc().date()
        args = request.args.to_dict()
        end = date_field(args, "end_date", required=False) or today
        start = date_field(args, "start_date", required=False) or (end - timedelta(days=30))
        records = container.attendance_service.list_range(
            current_role=current_role(),
            start_date=start,
            end_date=end,
            employee_id=int_field(args, "employee_id", required=False),
        )
        return ok(records)

    @app.route("/api/attendance/my", methods=["GET"], endpoint="api_my_attendance")
    @login_required
    def my_attendance():
        return ok(container.attendance_service.get_history(current_user_id()))

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_today_attendance")
    @login_required
    def today_attendance():
        return ok(container.attendance_service.get_today_record(current_user_id()))
