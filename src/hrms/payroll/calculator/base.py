from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ..model import Payslip


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute(self, *, annual_salary: Decimal, absent_days: int) -> Payslip:
        raise NotImplementedError
