from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus, EmployeeType, LeaveType, Role
from .model import Department, Employee


class EmployeeRepository(Protocol):
    """Repository interface for the employee directory.

    Note (DIP): services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Employee]:
        """Active employees only; the payroll run iterates this list."""

        raise NotImplementedError

    def create_employee(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
        department_id: Optional[int],
        employee_type: EmployeeType,
        annual_salary: Optional[Decimal],
        joined_on: Optional[date],
        entitlements: Mapping[LeaveType, int],
    ) -> int:
        """Insert the employee and the opening leave balances in one transaction.

        Raises ValidationError for a taken email or an unknown department.
        """

        raise NotImplementedError

    def set_status(self, employee_id: int, *, status: EmployeeStatus) -> bool:
        raise NotImplementedError


class DepartmentRepository(Protocol):
    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError
