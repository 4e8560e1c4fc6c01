from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveActioned, LeaveBalanceItem, LeaveRequest


class LeaveRepository(Protocol):
    """Leave requests and balances.

    The two mutating methods are each one atomic transaction over the request
    row and its balance row. They return ``None``/``False`` instead of raising
    when their guard fails, so the caller can map a lost race to a domain error.
    """

    def get_request(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: int = 500,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def get_balance(self, employee_id: int, leave_type: LeaveType) -> Optional[LeaveBalanceItem]:
        raise NotImplementedError

    def list_balances(self, *, employee_id: Optional[int] = None) -> Sequence[LeaveBalanceItem]:
        raise NotImplementedError

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
        """Reserve ``days`` in ``pending`` and insert the request, all or nothing.

        With ``enforce_ceiling`` the reservation only happens while
        ``total - used - pending >= days``; otherwise the balance row is created
        on demand. Returns the new request id, or None when nothing was written.
        """

        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        decided_by: Optional[int],
        decided_at: datetime,
    ) -> bool:
        """Move a PENDING request to ``status`` and settle its balance in one step.

        ``pending -= days`` always, ``used += days`` only on approval. Returns
        False if the request was no longer PENDING.
        """

        raise NotImplementedError


class ActivityFeed(Protocol):
    """Notification collaborator. Delivery is fire-and-forget."""

    def publish(self, event: LeaveActioned) -> None:
        raise NotImplementedError
