from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Department
from .repository import DepartmentRepository


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department_id, department_name, manager_id FROM departments ORDER BY department_name")
            rows = fetchall(cur)
            return [
                Department(
                    department_id=int(r["department_id"]),
                    department_name=r["department_name"],
                    manager_id=r.get("manager_id"),
                )
                for r in rows
            ]
