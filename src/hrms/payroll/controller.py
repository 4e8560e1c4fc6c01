from __future__ import annotations

from flask import Flask, request

from ..common.web import current_role, current_user_id, int_field, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll/generate", methods=["POST"], endpoint="api_generate_payroll")
    @login_required
    def generate_payroll():
        data = json_body()
        records = container.payroll_service.generate(
            current_role=current_role(),
            month=int_field(data, "month"),
            year=int_field(data, "year"),
        )
        return ok(records, status=201, message=f"Generated {len(records)} payroll records")

    @app.route("/api/payroll/<int:payroll_id>/mark-paid", methods=["POST"], endpoint="api_mark_payroll_paid")
    @login_required
    def mark_paid(payroll_id: int):
        record = container.payroll_service.mark_paid(current_role=current_role(), payroll_id=payroll_id)
        return ok(record, message="Payroll marked as paid")

    @app.route("/api/payroll", methods=["GET"], endpoint="api_payroll")
    @login_required
    def list_payroll():
        args = request.args.to_dict()
        records = container.payroll_service.list_all(
            current_role=current_role(),
            month=int_field(args, "month", required=False),
            year=int_field(args, "year", required=False),
        )
        return ok(records)

    @app.route("/api/payroll/my", methods=["GET"], endpoint="api_my_payroll")
    @login_required
    def my_payroll():
        return ok(container.payroll_service.list_mine(employee_id=current_user_id()))
