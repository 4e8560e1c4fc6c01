from __future__ import annotations

from flask import Flask, request

from ..common.web import current_role, current_user_id, date_field, json_body, login_required, ok, to_json
from ..container import Container
from .model import LeaveBalanceItem


def balance_json(item: LeaveBalanceItem) -> dict:
    return {**to_json(item), "available": item.available}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leaves", methods=["POST"], endpoint="api_submit_leave")
    @login_required
    def submit_leave():
        data = json_body()
        req = container.leave_service.submit(
            employee_id=current_user_id(),
            leave_type=data.get("leave_type"),
            start_date=date_field(data, "start_date"),
            end_date=date_field(data, "end_date"),
            reason=data.get("reason") or "",
        )
        return ok(req, status=201, message="Leave request submitted")

    @app.route("/api/leaves/<int:request_id>/action", methods=["PUT"], endpoint="api_action_leave")
    @login_required
    def action_leave(request_id: int):
        data = json_body()
        req = container.leave_service.action(
            current_role=current_role(),
            request_id=request_id,
            new_status=data.get("status"),
            actor_id=current_user_id(),
        )
        return ok(req, message=f"Leave request {req.status.value.lower()}")

    @app.route("/api/leaves", methods=["GET"], endpoint="api_leaves")
    @login_required
    def list_leaves():
        reqs = container.leave_service.list_all_requests(
            current_role=current_role(),
            status=request.args.get("status") or None,
        )
        return ok(reqs)

    @app.route("/api/leaves/my", methods=["GET"], endpoint="api_my_leaves")
    @login_required
    def my_leaves():
        return ok(container.leave_service.list_my_requests(employee_id=current_user_id()))

    @app.route("/api/leaves/balances", methods=["GET"], endpoint="api_leave_balances")
    @login_required
    def all_balances():
        grouped = container.leave_service.list_all_balances(current_role=current_role())
        return ok(
            [
                {"employee_id": g["employee_id"], "balances": [balance_json(b) for b in g["balances"]]}
                for g in grouped
            ]
        )

    @app.route("/api/leaves/balances/my", methods=["GET"], endpoint="api_my_leave_balances")
    @login_required
    def my_balances():
        return ok([balance_json(b) for b in container.leave_service.get_balances(employee_id=current_user_id())])
