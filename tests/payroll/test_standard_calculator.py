from decimal import Decimal

import pytest

from hrms.core.exceptions import ValidationError
from hrms.payroll.calculator.standard_calculator import PayrollPolicy, StandardPayrollCalculator, money


def test_standard_breakdown_without_absences():
    slip = StandardPayrollCalculator().compute(annual_salary=Decimal("120000"), absent_days=0)

    assert slip.gross_pay == Decimal("10000.00")
    assert slip.basic == Decimal("5000.00")
    assert slip.hra == Decimal("2000.00")
    assert slip.special == Decimal("3000.00")
    assert slip.provident_fund == Decimal("600.00")
    assert slip.tax == Decimal("500.00")
    assert slip.absence_deduction == Decimal("0.00")
    assert slip.net_pay == Decimal("8900.00")


def test_absences_are_deducted_per_working_day():
    slip = StandardPayrollCalculator().compute(annual_salary=Decimal("120000"), absent_days=2)

    assert slip.absence_deduction == Decimal("909.09")
    assert slip.net_pay == Decimal("7990.91")
    assert slip.absent_days == 2


def test_no_tax_below_threshold():
    slip = StandardPayrollCalculator().compute(annual_salary=Decimal("48000"), absent_days=0)

    assert slip.gross_pay == Decimal("4000.00")
    assert slip.tax == Decimal("0.00")
    assert slip.net_pay == Decimal("3760.00")


def test_rounding_is_half_away_from_zero():
    assert money(Decimal("0.125")) == Decimal("0.13")
    assert money(Decimal("-0.125")) == Decimal("-0.13")
    assert money(Decimal("2.675")) == Decimal("2.68")


def test_policy_overrides_from_settings():
    policy = PayrollPolicy.from_settings({"tax_threshold": "50000", "tax_rate": 0.2})
    slip = StandardPayrollCalculator(policy).compute(annual_salary=Decimal("120000"), absent_days=0)

    assert policy.tax_rate == Decimal("0.2")
    assert slip.tax == Decimal("0.00")
    assert slip.net_pay == Decimal("9400.00")


def test_policy_rejects_unknown_keys():
    with pytest.raises(ValueError):
        PayrollPolicy.from_settings({"bonus_rate": "0.5"})


def test_blank_policy_values_fall_back_to_defaults():
    policy = PayrollPolicy.from_settings({"tax_threshold": "", "tax_rate": "  ", "working_days": None})

    assert policy == PayrollPolicy()


def test_non_numeric_policy_value_is_rejected():
    with pytest.raises(ValueError, match="tax_rate"):
        PayrollPolicy.from_settings({"tax_rate": "ten percent"})


def test_negative_salary_is_rejected():
    with pytest.raises(ValidationError):
        StandardPayrollCalculator().compute(annual_salary=Decimal("-1"), absent_days=0)
