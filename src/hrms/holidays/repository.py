from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def get(self, holiday_id: int) -> Optional[Holiday]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Holiday]:
        """Ordered by date ascending."""

        raise NotImplementedError

    def create(self, *, holiday_date: date, name: str, description: Optional[str], is_optional: bool) -> int:
        raise NotImplementedError

    def update(
        self,
        holiday_id: int,
        *,
        holiday_date: date,
        name: str,
        description: Optional[str],
        is_optional: bool,
    ) -> bool:
        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError
