from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import EmployeeStatus, EmployeeType, LeaveType, Role
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, full_name, email, password_hash, role, department_id,
    status, employee_type, annual_salary, joined_on
"""


def _to_employee(row: dict) -> Employee:
    salary = row.get("annual_salary")
    return Employee(
        employee_id=int(row["employee_id"]),
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        department_id=row.get("department_id"),
        status=EmployeeStatus(row["status"]),
        employee_type=EmployeeType(row["employee_type"]),
        annual_salary=Decimal(salary) if salary is not None else None,
        joined_on=row.get("joined_on"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY employee_id")
            return [_to_employee(r) for r in fetchall(cur)]

    def list_active(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE status=%s ORDER BY employee_id",
                (EmployeeStatus.ACTIVE.value,),
            )
            return [_to_employee(r) for r in fetchall(cur)]

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO employees(
                        full_name, email, password_hash, role, department_id,
                        status, employee_type, annual_salary, joined_on
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        full_name,
                        email,
                        password_hash,
                        role.value,
                        department_id,
                        EmployeeStatus.ACTIVE.value,
                        employee_type.value,
                        annual_salary,
                        joined_on,
                    ),
                )
                employee_id = int(cur.lastrowid)
                if entitlements:
                    cur.executemany(
                        """
                        INSERT INTO leave_balances(employee_id, leave_type, total, used, pending)
                        VALUES(%s,%s,%s,0,0)
                        """,
                        [(employee_id, leave_type.value, int(total)) for leave_type, total in entitlements.items()],
                    )
                return employee_id
        except mysql.connector.IntegrityError as exc:
            if exc.errno == errorcode.ER_DUP_ENTRY:
                raise ValidationError("Email is already registered") from exc
            if exc.errno == errorcode.ER_NO_REFERENCED_ROW_2:
                raise ValidationError("Unknown department") from exc
            raise

    def set_status(self, employee_id: int, *, status: EmployeeStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET status=%s WHERE employee_id=%s",
                (status.value, int(employee_id)),
            )
            return cur.rowcount > 0
