from __future__ import annotations

from flask import Flask

from ..common.web import current_role, date_field, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/holidays", methods=["GET"], endpoint="api_holidays")
    @login_required
    def list_holidays():
        return ok(container.holiday_service.list_all())

    @app.route("/api/holidays", methods=["POST"], endpoint="api_create_holiday")
    @login_required
    def create_holiday():
        data = json_body()
        holiday = container.holiday_service.create(
            current_role=current_role(),
            holiday_date=date_field(data, "date"),
            name=data.get("name", ""),
            description=data.get("description"),
            is_optional=bool(data.get("is_optional")),
        )
        return ok(holiday, status=201, message="Holiday created")

    @app.route("/api/holidays/<int:holiday_id>", methods=["PUT"], endpoint="api_update_holiday")
    @login_required
    def update_holiday(holiday_id: int):
        data = json_body()
        holiday = container.holiday_service.update(
            current_role=current_role(),
            holiday_id=holiday_id,
            holiday_date=date_field(data, "date"),
            name=data.get("name", ""),
            description=data.get("description"),
            is_optional=bool(data.get("is_optional")),
        )
        return ok(holiday, message="Holiday updated")

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="api_delete_holiday")
    @login_required
    def delete_holiday(holiday_id: int):
        container.holiday_service.delete(current_role=current_role(), holiday_id=holiday_id)
        return ok(message="Holiday removed")
