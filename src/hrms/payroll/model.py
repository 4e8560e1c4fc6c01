from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class Payslip:
    """Computed monthly breakdown for one employee (not yet persisted)."""

    gross_pay: Decimal
    basic: Decimal
    hra: Decimal
    special: Decimal
    tax: Decimal
    provident_fund: Decimal
    absence_deduction: Decimal
    net_pay: Decimal
    absent_days: int = 0


@dataclass(frozen=True)
class PayrollRecord:
    """One employee's payroll for one (month, year) period."""

    payroll_id: int
    employee_id: int
    month: int
    year: int
    basic: Decimal
    hra: Decimal
    special: Decimal
    tax: Decimal
    provident_fund: Decimal
    absence_deduction: Decimal
    gross_pay: Decimal
    net_pay: Decimal
    status: PayrollStatus
    generated_at: datetime
    absent_days: int = 0
    paid_at: Optional[datetime] = None
