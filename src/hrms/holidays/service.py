from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.validators import require_max_length, require_non_empty, require_role
from ..core.constants import HR_ROLES, MAX_HOLIDAY_DESCRIPTION_LENGTH, MAX_NAME_LENGTH
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from .model import Holiday
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


def _clean(holiday_date: Optional[date], name: str, description: Optional[str]):
    name = require_max_length(require_non_empty(name, "Holiday name"), "Holiday name", MAX_NAME_LENGTH)
    if holiday_date is None:
        raise ValidationError("Holiday date is required")
    description = (description or "").strip() or None
    return name, require_max_length(description, "Description", MAX_HOLIDAY_DESCRIPTION_LENGTH)


class HolidayService:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def list_all(self) -> Sequence[Holiday]:
        return self._holidays.list_all()

    def get(self, holiday_id: int) -> Holiday:
        holiday = self._holidays.get(int(holiday_id))
        if not holiday:
            raise NotFoundError("Holiday not found")
        return holiday

    def create(
        self,
        *,
        current_role: Role,
        holiday_date: Optional[date],
        name: str,
        description: Optional[str] = None,
        is_optional: bool = False,
    ) -> Holiday:
        require_role(current_role, HR_ROLES)
        name, description = _clean(holiday_date, name, description)

        holiday_id = self._holidays.create(
            holiday_date=holiday_date,
            name=name,
            description=description,
            is_optional=bool(is_optional),
        )
        logger.info("holiday %s created: %s on %s", holiday_id, name, holiday_date)
        return self.get(holiday_id)

    def update(
        self,
        *,
        current_role: Role,
        holiday_id: int,
        holiday_date: Optional[date],
        name: str,
        description: Optional[str] = None,
        is_optional: bool = False,
    ) -> Holiday:
        require_role(current_role, HR_ROLES)
        name, description = _clean(holiday_date, name, description)

        updated = self._holidays.update(
            int(holiday_id),
            holiday_date=holiday_date,
            name=name,
            description=description,
            is_optional=bool(is_optional),
        )
        if not updated:
            raise NotFoundError("Holiday not found")
        return self.get(holiday_id)

    def delete(self, *, current_role: Role, holiday_id: int) -> None:
        require_role(current_role, HR_ROLES)
        if not self._holidays.delete(int(holiday_id)):
            raise NotFoundError("Holiday not found")
        logger.info("holiday %s removed", holiday_id)
