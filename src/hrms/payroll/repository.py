from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence, Tuple

from .model import Payslip, PayrollRecord


class PayrollRepository(Protocol):
    def exists_for_period(self, *, month: int, year: int) -> bool:
        raise NotImplementedError

    def create_period(
        self,
        *,
        month: int,
        year: int,
        payslips: Sequence[Tuple[int, Payslip]],
        generated_at: datetime,
    ) -> Optional[Sequence[int]]:
        """Insert one GENERATED record per (employee_id, payslip), all or nothing.

        The "period already has records" check runs inside the same transaction.
        Returns the new ids, or None when the period was already generated
        (including by a concurrent run), in which case nothing is written.
        """

        raise NotImplementedError

    def get(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def mark_paid(self, *, payroll_id: int, paid_at: datetime) -> bool:
        raise NotImplementedError
