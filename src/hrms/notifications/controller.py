from __future__ import annotations

from flask import Flask

from ..common.web import current_user_id, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="api_notifications")
    @login_required
    def my_notifications():
        return ok(container.notification_service.list_mine(employee_id=current_user_id()))

    @app.route("/api/notifications/<int:notification_id>/read", methods=["PUT"], endpoint="api_notification_read")
    @login_required
    def mark_read(notification_id: int):
        notification = container.notification_service.mark_read(
            employee_id=current_user_id(), notification_id=notification_id
        )
        return ok(notification)

    @app.route("/api/notifications/read-all", methods=["PUT"], endpoint="api_notifications_read_all")
    @login_required
    def mark_all_read():
        count = container.notification_service.mark_all_read(employee_id=current_user_id())
        return ok({"updated": count}, message="All notifications marked as read")
