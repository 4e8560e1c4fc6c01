from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..attendance.service import AttendanceService
from ..common.datetime_utils import month_bounds, now_utc
from ..common.validators import require_period, require_role
from ..core.constants import HR_ROLES
from ..core.enums import Role
from ..core.exceptions import AlreadyGeneratedError, NotFoundError
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollRecord
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollService:
    """Payroll accrual: one run per (month, year), all or nothing."""

    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        attendance: AttendanceService,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._payroll = payroll
        self._employees = employees
        self._attendance = attendance
        self._calculator = calculator or StandardPayrollCalculator()

    def generate(self, *, current_role: Role, month, year, now: Optional[datetime] = None) -> Sequence[PayrollRecord]:
        require_role(current_role, HR_ROLES)
        month, year = require_period(month, year)

        if self._payroll.exists_for_period(month=month, year=year):
            raise AlreadyGeneratedError(f"Payroll for {month:02d}/{year} already generated")

        start, end = month_bounds(month, year)

        # Compute every payslip before writing anything: a bad salary aborts the run.
        payslips = []
        for employee in self._employees.list_active():
            if employee.annual_salary is None:
                logger.info("payroll %02d/%s: employee %s has no salary, skipped", month, year, employee.employee_id)
                continue
            absent_days = self._attendance.count_absences(employee.employee_id, start, end)
            payslips.append(
                (employee.employee_id, self._calculator.compute(annual_salary=employee.annual_salary, absent_days=absent_days))
            )

        ids = self._payroll.create_period(month=month, year=year, payslips=payslips, generated_at=now or now_utc())
        if ids is None:
            # A concurrent run claimed the period first; ours was rolled back entirely.
            raise AlreadyGeneratedError(f"Payroll for {month:02d}/{year} already generated")

        logger.info("payroll %02d/%s generated: %d records", month, year, len(ids))
        return self._payroll.list_records(month=month, year=year)

    def mark_paid(self, *, current_role: Role, payroll_id: int, now: Optional[datetime] = None) -> PayrollRecord:
        require_role(current_role, HR_ROLES)

        if not self._payroll.mark_paid(payroll_id=int(payroll_id), paid_at=now or now_utc()):
            raise NotFoundError("Payroll record not found")

        logger.info("payroll record %s marked paid", payroll_id)
        return self.get(payroll_id)

    def get(self, payroll_id: int) -> PayrollRecord:
        record = self._payroll.get(int(payroll_id))
        if not record:
            raise NotFoundError("Payroll record not found")
        return record

    def list_all(self, *, current_role: Role, month=None, year=None) -> Sequence[PayrollRecord]:
        require_role(current_role, HR_ROLES)
        if month is not None and year is not None:
            month, year = require_period(month, year)
        return self._payroll.list_records(
            month=int(month) if month is not None else None,
            year=int(year) if year is not None else None,
        )

    def list_mine(self, *, employee_id: int) -> Sequence[PayrollRecord]:
        return self._payroll.list_records(employee_id=int(employee_id))
