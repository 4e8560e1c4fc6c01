from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, retry_on_conflict
from .model import LeaveBalanceItem, LeaveRequest
from .repository import LeaveRepository

_REQUEST_COLUMNS = """
    request_id, employee_id, leave_type, start_date, end_date, days, reason,
    status, created_at, decided_by, decided_at
"""


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=int(r["days"]),
        reason=r.get("reason") or "",
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
    )


def _to_balance(r: dict) -> LeaveBalanceItem:
    return LeaveBalanceItem(
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        total=int(r["total"]),
        used=int(r["used"]),
        pending=int(r["pending"]),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Requests --------
    def get_request(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_REQUEST_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: int = 500,
    ) -> Sequence[LeaveRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM leave_requests
                WHERE {where}
                ORDER BY start_date DESC, request_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_request(r) for r in fetchall(cur)]

    # -------- Balances --------
    def get_balance(self, employee_id: int, leave_type: LeaveType) -> Optional[LeaveBalanceItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, leave_type, total, used, pending
                FROM leave_balances
                WHERE employee_id=%s AND leave_type=%s
                """,
                (int(employee_id), leave_type.value),
            )
            r = fetchone(cur)
            return _to_balance(r) if r else None

    def list_balances(self, *, employee_id: Optional[int] = None) -> Sequence[LeaveBalanceItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            if employee_id is None:
                cur.execute(
                    """
                    SELECT employee_id, leave_type, total, used, pending
                    FROM leave_balances
                    ORDER BY employee_id, leave_type
                    """
                )
            else:
                cur.execute(
                    """
                    SELECT employee_id, leave_type, total, used, pending
                    FROM leave_balances
                    WHERE employee_id=%s
                    ORDER BY leave_type
                    """,
                    (int(employee_id),),
                )
            return [_to_balance(r) for r in fetchall(cur)]

    # -------- State machine --------
    @retry_on_conflict
    def create_pending(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        days: int,
        reason: str,
        created_at: datetime,
        enforce_ceiling: bool,
    ) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            if enforce_ceiling:
                # Guarded increment: the row lock taken by UPDATE serializes
                # concurrent reservations, and the WHERE clause sees the latest value.
                cur.execute(
                    """
                    UPDATE leave_balances
                    SET pending = pending + %s
                    WHERE employee_id=%s AND leave_type=%s AND total - used - pending >= %s
                    """,
                    (int(days), int(employee_id), leave_type.value, int(days)),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO leave_balances(employee_id, leave_type, total, used, pending)
                    VALUES(%s,%s,0,0,%s)
                    ON DUPLICATE KEY UPDATE pending = pending + VALUES(pending)
                    """,
                    (int(employee_id), leave_type.value, int(days)),
                )
            if cur.rowcount <= 0:
                return None

            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, days, reason, status, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    int(days),
                    reason,
                    LeaveStatus.PENDING.value,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    @retry_on_conflict
    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        decided_by: Optional[int],
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, leave_type, days
                FROM leave_requests
                WHERE request_id=%s AND status=%s
                FOR UPDATE
                """,
                (int(request_id), LeaveStatus.PENDING.value),
            )
            req = fetchone(cur)
            if not req:
                return False

            days = int(req["days"])
            used_delta = days if status == LeaveStatus.APPROVED else 0

            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, decided_by=%s, decided_at=%s
                WHERE request_id=%s
                """,
                (status.value, decided_by, decided_at, int(request_id)),
            )
            cur.execute(
                """
                UPDATE leave_balances
                SET pending = pending - %s, used = used + %s
                WHERE employee_id=%s AND leave_type=%s
                """,
                (days, used_delta, int(req["employee_id"]), req["leave_type"]),
            )
            if cur.rowcount != 1:
                # The balance row is created at submission; without it the ledger is broken.
                raise RuntimeError(f"Leave balance missing for request {request_id}")
            return True
