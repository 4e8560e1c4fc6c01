from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import EmployeeStatus, EmployeeType, Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee as seen by the ledgers.

    Note: Plain data object (no DB access). Ledger rows reference it by id only.
    """

    employee_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    department_id: Optional[int]
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    employee_type: EmployeeType = EmployeeType.PERMANENT
    annual_salary: Optional[Decimal] = None
    joined_on: Optional[date] = None

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE


@dataclass(frozen=True)
class Department:
    department_id: int
    department_name: str
    manager_id: Optional[int] = None
