from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence, Tuple

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, retry_on_conflict
from .model import Payslip, PayrollRecord
from .repository import PayrollRepository

_COLUMNS = """
    payroll_id, employee_id, month, year, basic, hra, special, tax, provident_fund,
    absence_deduction, absent_days, gross_pay, net_pay, status, generated_at, paid_at
"""


def _to_record(r: dict) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        basic=Decimal(r["basic"]),
        hra=Decimal(r["hra"]),
        special=Decimal(r["special"]),
        tax=Decimal(r["tax"]),
        provident_fund=Decimal(r["provident_fund"]),
        absence_deduction=Decimal(r["absence_deduction"]),
        absent_days=int(r.get("absent_days") or 0),
        gross_pay=Decimal(r["gross_pay"]),
        net_pay=Decimal(r["net_pay"]),
        status=PayrollStatus(r["status"]),
        generated_at=r["generated_at"],
        paid_at=r.get("paid_at"),
    )


class _PeriodTaken(Exception):
    pass


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists_for_period(self, *, month: int, year: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM payroll_records WHERE year=%s AND month=%s LIMIT 1",
                (int(year), int(month)),
            )
            return fetchone(cur) is not None

    @retry_on_conflict
    def create_period(
        self,
        *,
        month: int,
        year: int,
        payslips: Sequence[Tuple[int, Payslip]],
        generated_at: datetime,
    ) -> Optional[Sequence[int]]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                # Locking read: a concurrent run for the same period blocks here
                # (or deadlocks and is retried) instead of slipping past the guard.
                cur.execute(
                    "SELECT payroll_id FROM payroll_records WHERE year=%s AND month=%s LIMIT 1 FOR UPDATE",
                    (int(year), int(month)),
                )
                if fetchone(cur) is not None:
                    raise _PeriodTaken()

                ids: list[int] = []
                for employee_id, slip in payslips:
                    cur.execute(
                        """
                        INSERT INTO payroll_records(
                            employee_id, month, year, basic, hra, special, tax, provident_fund,
                            absence_deduction, absent_days, gross_pay, net_pay, status, generated_at
                        )
                        VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                        """,
                        (
                            int(employee_id),
                            int(month),
                            int(year),
                            slip.basic,
                            slip.hra,
                            slip.special,
                            slip.tax,
                            slip.provident_fund,
                            slip.absence_deduction,
                            int(slip.absent_days),
                            slip.gross_pay,
                            slip.net_pay,
                            PayrollStatus.GENERATED.value,
                            generated_at,
                        ),
                    )
                    ids.append(int(cur.lastrowid))
                return ids
        except _PeriodTaken:
            return None
        except mysql.connector.IntegrityError as exc:
            # Unique (employee_id, year, month) tripped by a concurrent run: whole batch rolled back.
            if exc.errno == errorcode.ER_DUP_ENTRY:
                return None
            raise

    def get(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[PayrollRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if month is not None:
            clauses.append("month=%s")
            params.append(int(month))
        if year is not None:
            clauses.append("year=%s")
            params.append(int(year))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records
                WHERE {where}
                ORDER BY year DESC, month DESC, employee_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def mark_paid(self, *, payroll_id: int, paid_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # rowcount only counts changed rows, so a repeat call would look like a miss.
            cur.execute("SELECT payroll_id FROM payroll_records WHERE payroll_id=%s FOR UPDATE", (int(payroll_id),))
            if fetchone(cur) is None:
                return False
            cur.execute(
                """
                UPDATE payroll_records
                SET status=%s, paid_at=COALESCE(paid_at, %s)
                WHERE payroll_id=%s
                """,
                (PayrollStatus.PAID.value, paid_at, int(payroll_id)),
            )
            return True
