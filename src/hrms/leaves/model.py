from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveBalanceItem:
    """Per (employee, leave type) counters, in days.

    Only the leave state machine changes these; for paid types
    ``used + pending <= total`` always holds.
    """

    employee_id: int
    leave_type: LeaveType
    total: int
    used: int
    pending: int

    @property
    def available(self) -> int:
        return self.total - self.used - self.pending


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: int
    reason: str
    status: LeaveStatus
    created_at: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None


@dataclass(frozen=True)
class LeaveActioned:
    """One-shot activity event emitted after a request leaves PENDING."""

    employee_id: int
    request_id: int
    new_status: LeaveStatus
    days: int
