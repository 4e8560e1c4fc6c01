from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.exceptions import NotFoundError
from ..leaves.model import LeaveActioned
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)

LEAVE_LINK = "Leave Requests"


class NotificationService:
    """Activity feed backed by the notifications table.

    Also serves as the leave state machine's ``ActivityFeed``.
    """

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def publish(self, event: LeaveActioned, *, now: Optional[datetime] = None) -> Notification:
        status = event.new_status.value
        notification_id = self._notifications.create(
            employee_id=event.employee_id,
            title=f"Leave Request {status}",
            message=f"Your leave request #{event.request_id} for {event.days} day(s) was {status.lower()}.",
            link=LEAVE_LINK,
            created_at=now or now_utc(),
        )
        logger.debug("notification %s queued for employee %s", notification_id, event.employee_id)
        return self._get(notification_id)

    def _get(self, notification_id: int) -> Notification:
        notification = self._notifications.get(int(notification_id))
        if not notification:
            raise NotFoundError("Notification not found")
        return notification

    def list_mine(self, *, employee_id: int) -> Sequence[Notification]:
        return self._notifications.list_for_employee(int(employee_id), limit=DEFAULT_LIST_LIMIT)

    def mark_read(self, *, employee_id: int, notification_id: int) -> Notification:
        if not self._notifications.mark_read(notification_id=int(notification_id), employee_id=int(employee_id)):
            raise NotFoundError("Notification not found")
        return self._get(notification_id)

    def mark_all_read(self, *, employee_id: int) -> int:
        return self._notifications.mark_all_read(employee_id=int(employee_id))
