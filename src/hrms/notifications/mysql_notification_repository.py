from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository


def _to_notification(r: dict) -> Notification:
    return Notification(
        notification_id=int(r["notification_id"]),
        employee_id=int(r["employee_id"]),
        title=r["title"],
        message=r["message"],
        is_read=bool(r["is_read"]),
        created_at=r["created_at"],
        link=r.get("link"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, notification_id: int) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notification_id, employee_id, title, message, link, is_read, created_at
                FROM notifications
                WHERE notification_id=%s
                """,
                (int(notification_id),),
            )
            r = fetchone(cur)
            return _to_notification(r) if r else None

    def create(
        self,
        *,
        employee_id: int,
        title: str,
        message: str,
        link: Optional[str],
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(employee_id, title, message, link, is_read, created_at)
                VALUES(%s,%s,%s,%s,0,%s)
                """,
                (int(employee_id), title, message, link, created_at),
            )
            return int(cur.lastrowid)

    def list_for_employee(self, employee_id: int, *, limit: int) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notification_id, employee_id, title, message, link, is_read, created_at
                FROM notifications
                WHERE employee_id=%s
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_notification(r) for r in fetchall(cur)]

    def mark_read(self, *, notification_id: int, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT notification_id FROM notifications WHERE notification_id=%s AND employee_id=%s",
                (int(notification_id), int(employee_id)),
            )
            if fetchone(cur) is None:
                return False
            cur.execute("UPDATE notifications SET is_read=1 WHERE notification_id=%s", (int(notification_id),))
            return True

    def mark_all_read(self, *, employee_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE employee_id=%s AND is_read=0",
                (int(employee_id),),
            )
            return int(cur.rowcount)
