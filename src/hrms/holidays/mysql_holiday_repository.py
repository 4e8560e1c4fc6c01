from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Holiday
from .repository import HolidayRepository

_COLUMNS = "holiday_id, holiday_date, name, description, is_optional"


def _to_holiday(r: dict) -> Holiday:
    return Holiday(
        holiday_id=int(r["holiday_id"]),
        holiday_date=r["holiday_date"],
        name=r["name"],
        description=r.get("description"),
        is_optional=bool(r.get("is_optional")),
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, holiday_id: int) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def list_all(self) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM holidays ORDER BY holiday_date ASC, holiday_id ASC")
            return [_to_holiday(r) for r in fetchall(cur)]

    def create(self, *, holiday_date: date, name: str, description: Optional[str], is_optional: bool) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO holidays(holiday_date, name, description, is_optional)
                VALUES(%s,%s,%s,%s)
                """,
                (holiday_date, name, description, 1 if is_optional else 0),
            )
            return int(cur.lastrowid)

    def update(
        self,
        holiday_id: int,
        *,
        holiday_date: date,
        name: str,
        description: Optional[str],
        is_optional: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT holiday_id FROM holidays WHERE holiday_id=%s FOR UPDATE", (int(holiday_id),))
            if fetchone(cur) is None:
                return False
            cur.execute(
                """
                UPDATE holidays
                SET holiday_date=%s, name=%s, description=%s, is_optional=%s
                WHERE holiday_id=%s
                """,
                (holiday_date, name, description, 1 if is_optional else 0, int(holiday_id)),
            )
            return True

    def delete(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount > 0
