from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.web import current_role, current_user_id, date_field, int_field, json_body, login_required, ok
from ..core.constants import DEFAULT_SESSION_DAYS
from ..container import Container
from .model import Employee


def employee_json(employee: Employee) -> dict:
    """Public view of an employee; the password hash never leaves the server."""
    return {
        "employee_id": employee.employee_id,
        "full_name": employee.full_name,
        "email": employee.email,
        "role": employee.role.value,
        "department_id": employee.department_id,
        "status": employee.status.value,
        "employee_type": employee.employee_type.value,
        "annual_salary": str(employee.annual_salary) if employee.annual_salary is not None else None,
        "joined_on": employee.joined_on.isoformat() if employee.joined_on else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        session["dept_id"] = s_user.department_id

        return ok(s_user, message="Logged in")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        session.clear()
        return ok(message="Logged out")

    @app.route("/api/auth/me", methods=["GET"], endpoint="api_me")
    @login_required
    def me():
        return ok(employee_json(container.directory_service.get_employee(current_user_id())))

    @app.route("/api/employees", methods=["GET"], endpoint="api_employees")
    @login_required
    def list_employees():
        return ok([employee_json(e) for e in container.directory_service.list_employees()])

    @app.route("/api/employees", methods=["POST"], endpoint="api_hire_employee")
    @login_required
    def hire_employee():
        data = json_body()
        employee = container.directory_service.hire(
            current_role=current_role(),
            full_name=data.get("full_name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=data.get("role") or "Employee",
            department_id=int_field(data, "department_id", required=False),
            employee_type=data.get("employee_type") or "Permanent",
            annual_salary=data.get("annual_salary"),
            joined_on=date_field(data, "joined_on", required=False),
        )
        return ok(employee_json(employee), status=201, message="Employee created")

    @app.route("/api/employees/<int:employee_id>/deactivate", methods=["POST"], endpoint="api_deactivate_employee")
    @login_required
    def deactivate_employee(employee_id: int):
        employee = container.directory_service.deactivate(current_role=current_role(), employee_id=employee_id)
        return ok(employee_json(employee), message="Employee deactivated")

    @app.route("/api/departments", methods=["GET"], endpoint="api_departments")
    @login_required
    def list_departments():
        return ok(container.directory_service.list_departments())
