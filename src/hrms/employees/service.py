from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_enum, require_max_length, require_min_length, require_non_empty, require_role
from ..core.constants import DEFAULT_LEAVE_ENTITLEMENTS, HR_ROLES, MAX_EMAIL_LENGTH, MAX_NAME_LENGTH
from ..core.enums import EmployeeStatus, EmployeeType, Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import Department, Employee
from .repository import DepartmentRepository, EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    full_name: str
    email: str
    role: Role
    department_id: Optional[int]


class AuthService:
    """Use case: authenticate an employee (login)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, email: str, password: str) -> SessionUser:
        employee = self._employees.get_by_email((email or "").strip().lower())
        if not employee or not employee.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return SessionUser(
            user_id=employee.employee_id,
            full_name=employee.full_name,
            email=employee.email,
            role=employee.role,
            department_id=employee.department_id,
        )


class DirectoryService:
    """Use case: the minimal employee directory the ledgers depend on."""

    def __init__(self, employees: EmployeeRepository, departments: DepartmentRepository):
        self._employees = employees
        self._departments = departments

    def get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def list_active(self) -> Sequence[Employee]:
        return self._employees.list_active()

    def list_departments(self) -> Sequence[Department]:
        return self._departments.list_all()

    def hire(
        self,
        *,
        current_role: Role,
        full_name: str,
        email: str,
        password: str,
        role=Role.EMPLOYEE,
        department_id: Optional[int] = None,
        employee_type=EmployeeType.PERMANENT,
        annual_salary=None,
        joined_on: Optional[date] = None,
    ) -> Employee:
        require_role(current_role, HR_ROLES)

        full_name = require_max_length(require_non_empty(full_name, "Full name"), "Full name", MAX_NAME_LENGTH)
        email = require_max_length(require_non_empty(email, "Email").lower(), "Email", MAX_EMAIL_LENGTH)
        require_min_length(password, "Password", 6)
        role = require_enum(Role, role, "Role")
        employee_type = require_enum(EmployeeType, employee_type, "Employee type")

        if role == Role.ADMIN and current_role != Role.ADMIN:
            raise ValidationError("Only an Admin can create another Admin")
        if self._employees.get_by_email(email):
            raise ValidationError("Email is already registered")

        salary = None
        if annual_salary not in (None, ""):
            try:
                salary = Decimal(str(annual_salary))
            except InvalidOperation:
                raise ValidationError("Annual salary must be a number")
            if salary < 0:
                raise ValidationError("Annual salary cannot be negative")

        employee_id = self._employees.create_employee(
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            department_id=int(department_id) if department_id else None,
            employee_type=employee_type,
            annual_salary=salary,
            joined_on=joined_on,
            entitlements=DEFAULT_LEAVE_ENTITLEMENTS,
        )
        logger.info("hired employee %s (%s)", employee_id, role.value)
        return self.get_employee(employee_id)

    def deactivate(self, *, current_role: Role, employee_id: int) -> Employee:
        """Termination: the employee stops appearing in payroll runs; ledger history stays."""
        require_role(current_role, HR_ROLES)

        employee = self.get_employee(employee_id)
        if employee.role == Role.ADMIN and current_role != Role.ADMIN:
            raise ValidationError("Only an Admin can deactivate an Admin")
        if employee.is_active:
            self._employees.set_status(employee.employee_id, status=EmployeeStatus.INACTIVE)
            logger.info("deactivated employee %s", employee.employee_id)
        return self.get_employee(employee.employee_id)
