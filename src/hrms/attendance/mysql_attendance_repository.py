from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, retry_on_conflict
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, employee_id, work_date, status, clock_in, clock_out, work_minutes"


def _to_record(r: dict) -> AttendanceRecord:
    minutes = r.get("work_minutes")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        clock_in=r.get("clock_in"),
        clock_out=r.get("clock_out"),
        work_minutes=int(minutes) if minutes is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_range(self, *, start_date: date, end_date: date, employee_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY work_date DESC, employee_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    @retry_on_conflict
    def record_clock_in(self, *, employee_id: int, work_date: date, clock_in: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # Make sure the day's row exists (and is locked) before the guarded update.
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, status)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE attendance_id=attendance_id
                """,
                (int(employee_id), work_date, AttendanceStatus.NOT_MARKED.value),
            )
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_in=%s, status=%s
                WHERE employee_id=%s AND work_date=%s AND clock_in IS NULL
                """,
                (clock_in, AttendanceStatus.PRESENT.value, int(employee_id), work_date),
            )
            if cur.rowcount > 0:
                return True
        return False

    @retry_on_conflict
    def record_clock_out(self, *, attendance_id: int, clock_out: datetime, work_minutes: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_out=%s, work_minutes=%s
                WHERE attendance_id=%s AND clock_in IS NOT NULL AND clock_out IS NULL
                """,
                (clock_out, int(work_minutes), int(attendance_id)),
            )
            return cur.rowcount > 0

    @retry_on_conflict
    def upsert_status(self, *, employee_id: int, work_date: date, status: AttendanceStatus) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, status)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status)
                """,
                (int(employee_id), work_date, status.value),
            )

    def count_status(self, *, employee_id: int, start_date: date, end_date: date, status: AttendanceStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM attendance_records
                WHERE employee_id=%s AND status=%s AND work_date BETWEEN %s AND %s
                """,
                (int(employee_id), status.value, start_date, end_date),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0
