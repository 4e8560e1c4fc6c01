from __future__ import annotations

from dataclasses import dataclass, fields, replace
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Mapping, Optional

from ...core.exceptions import ValidationError
from ..model import Payslip
from .base import PayrollCalculator

CENT = Decimal("0.01")


def money(value: Decimal) -> Decimal:
    """Round to cents, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PayrollPolicy:
    """Tunable payroll parameters.

    The tax rule is a flat rate on the monthly gross above ``tax_threshold``.
    """

    basic_ratio: Decimal = Decimal("0.5")
    hra_ratio: Decimal = Decimal("0.4")
    provident_fund_rate: Decimal = Decimal("0.12")
    tax_threshold: Decimal = Decimal("5000")
    tax_rate: Decimal = Decimal("0.1")
    working_days: Decimal = Decimal("22")

    @classmethod
    def from_settings(cls, overrides: Optional[Mapping[str, object]]) -> "PayrollPolicy":
        policy = cls()
        if not overrides:
            return policy
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown payroll policy keys: {sorted(unknown)}")
        values = {}
        for key, value in overrides.items():
            if value is None or not str(value).strip():
                # Blank env vars mean "use the default".
                continue
            try:
                values[key] = Decimal(str(value).strip())
            except InvalidOperation:
                raise ValueError(f"Payroll policy {key} must be a number, got {value!r}")
        return replace(policy, **values)


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule.

    gross = annual / 12; basic = gross * basic_ratio; hra = basic * hra_ratio;
    special = gross - basic - hra; absence = absent_days * gross / working_days;
    pf = basic * provident_fund_rate; tax = max(0, gross - threshold) * tax_rate;
    net = gross - (tax + pf + absence). Outputs are rounded to cents.
    """

    def __init__(self, policy: Optional[PayrollPolicy] = None):
        self.policy = policy or PayrollPolicy()

    def compute(self, *, annual_salary: Decimal, absent_days: int) -> Payslip:
        p = self.policy
        annual_salary = Decimal(annual_salary)
        if annual_salary < 0:
            raise ValidationError("Annual salary cannot be negative")
        if absent_days < 0:
            raise ValidationError("Absent days cannot be negative")

        gross = annual_salary / 12
        basic = gross * p.basic_ratio
        hra = basic * p.hra_ratio
        special = gross - basic - hra
        absence = absent_days * (gross / p.working_days)
        provident_fund = basic * p.provident_fund_rate
        tax = max(Decimal(0), gross - p.tax_threshold) * p.tax_rate
        net = gross - (tax + provident_fund + absence)

        return Payslip(
            gross_pay=money(gross),
            basic=money(basic),
            hra=money(hra),
            special=money(special),
            tax=money(tax),
            provident_fund=money(provident_fund),
            absence_deduction=money(absence),
            net_pay=money(net),
            absent_days=int(absent_days),
        )
