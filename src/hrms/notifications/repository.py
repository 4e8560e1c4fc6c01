from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def get(self, notification_id: int) -> Optional[Notification]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        title: str,
        message: str,
        link: Optional[str],
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, limit: int) -> Sequence[Notification]:
        """Newest first."""

        raise NotImplementedError

    def mark_read(self, *, notification_id: int, employee_id: int) -> bool:
        """False if the notification does not exist or belongs to someone else."""

        raise NotImplementedError

    def mark_all_read(self, *, employee_id: int) -> int:
        raise NotImplementedError
