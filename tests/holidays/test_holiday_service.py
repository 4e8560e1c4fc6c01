from __future__ import annotations

from datetime import date

import pytest

from hrms.core.enums import Role
from hrms.core.exceptions import AuthorizationError, NotFoundError, ValidationError


def test_holiday_lifecycle(container):
    svc = container.holiday_service

    xmas = svc.create(current_role=Role.HR, holiday_date=date(2024, 12, 25), name="Christmas Day")
    svc.create(current_role=Role.HR, holiday_date=date(2024, 1, 1), name=" New Year ", description="  ")

    assert [h.name for h in svc.list_all()] == ["New Year", "Christmas Day"]
    assert svc.list_all()[0].description is None

    updated = svc.update(
        current_role=Role.ADMIN,
        holiday_id=xmas.holiday_id,
        holiday_date=date(2024, 12, 26),
        name="Boxing Day",
        is_optional=True,
    )
    assert (updated.holiday_date, updated.name, updated.is_optional) == (date(2024, 12, 26), "Boxing Day", True)

    svc.delete(current_role=Role.ADMIN, holiday_id=xmas.holiday_id)
    assert [h.name for h in svc.list_all()] == ["New Year"]


def test_holiday_maintenance_is_privileged(container):
    with pytest.raises(AuthorizationError):
        container.holiday_service.create(current_role=Role.MANAGER, holiday_date=date(2024, 5, 1), name="Labour Day")


def test_holiday_validation(container):
    svc = container.holiday_service

    with pytest.raises(ValidationError):
        svc.create(current_role=Role.HR, holiday_date=date(2024, 5, 1), name="  ")
    with pytest.raises(ValidationError):
        svc.create(current_role=Role.HR, holiday_date=None, name="Labour Day")
    with pytest.raises(NotFoundError):
        svc.update(current_role=Role.HR, holiday_id=99, holiday_date=date(2024, 5, 1), name="Labour Day")
    with pytest.raises(NotFoundError):
        svc.delete(current_role=Role.HR, holiday_id=99)


def test_holiday_field_lengths(container):
    svc = container.holiday_service

    with pytest.raises(ValidationError):
        svc.create(current_role=Role.HR, holiday_date=date(2024, 5, 1), name="L" * 101)
    with pytest.raises(ValidationError):
        svc.create(current_role=Role.HR, holiday_date=date(2024, 5, 1), name="Labour Day", description="d" * 256)

    holiday = svc.create(current_role=Role.HR, holiday_date=date(2024, 5, 1), name="Labour Day")
    with pytest.raises(ValidationError):
        svc.update(
            current_role=Role.HR,
            holiday_id=holiday.holiday_id,
            holiday_date=date(2024, 5, 1),
            name="Labour Day",
            description="d" * 256,
        )
    assert svc.get(holiday.holiday_id).description is None
