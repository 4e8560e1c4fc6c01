from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import inclusive_days, now_utc
from ..common.validators import require_enum, require_max_length, require_role
from ..core.constants import APPROVER_ROLES, DEFAULT_LIST_LIMIT, MAX_REASON_LENGTH
from ..core.enums import LeaveStatus, LeaveType, Role
from ..core.exceptions import (
    AlreadyActionedError,
    InsufficientBalanceError,
    InvalidRangeError,
    NotFoundError,
    ValidationError,
)
from .model import LeaveActioned, LeaveBalanceItem, LeaveRequest
from .repository import ActivityFeed, LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave request state machine driving the leave balance ledger.

    PENDING is the only initial state; APPROVED and REJECTED are terminal.
    Submission reserves days in ``pending``; the one allowed transition
    releases them, moving them into ``used`` on approval.
    """

    def __init__(self, leaves: LeaveRepository, *, feed: Optional[ActivityFeed] = None):
        self._leaves = leaves
        self._feed = feed

    def submit(
        self,
        *,
        employee_id: int,
        leave_type,
        start_date: date,
        end_date: date,
        reason: str = "",
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        leave_type = require_enum(LeaveType, leave_type, "Leave type")
        if end_date < start_date:
            raise InvalidRangeError("End date must be on or after start date")

        reason = require_max_length((reason or "").strip(), "Reason", MAX_REASON_LENGTH)
        days = inclusive_days(start_date, end_date)

        if leave_type.is_paid:
            balance = self._leaves.get_balance(int(employee_id), leave_type)
            if not balance or balance.available < days:
                raise InsufficientBalanceError("Insufficient leave balance")

        request_id = self._leaves.create_pending(
            employee_id=int(employee_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            days=days,
            reason=reason,
            created_at=now or now_utc(),
            enforce_ceiling=leave_type.is_paid,
        )
        if request_id is None:
            # The balance moved between our read and the guarded reservation.
            raise InsufficientBalanceError("Insufficient leave balance")

        logger.info("leave %s submitted: employee=%s type=%s days=%s", request_id, employee_id, leave_type.value, days)
        return self.get_request(request_id)

    def action(
        self,
        *,
        current_role: Role,
        request_id: int,
        new_status,
        actor_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        require_role(current_role, APPROVER_ROLES)

        new_status = require_enum(LeaveStatus, new_status, "Status")
        if new_status == LeaveStatus.PENDING:
            raise ValidationError("A request can only be approved or rejected")

        req = self._leaves.get_request(int(request_id))
        if not req:
            raise NotFoundError("Leave request not found")
        if req.status != LeaveStatus.PENDING:
            raise AlreadyActionedError("Leave request already actioned")

        decided = self._leaves.decide(
            request_id=req.request_id,
            status=new_status,
            decided_by=actor_id,
            decided_at=now or now_utc(),
        )
        if not decided:
            # Someone else actioned it after our read.
            raise AlreadyActionedError("Leave request already actioned")

        logger.info("leave %s %s by %s", req.request_id, new_status.value.lower(), actor_id)
        self._publish(LeaveActioned(employee_id=req.employee_id, request_id=req.request_id, new_status=new_status, days=req.days))
        return self.get_request(req.request_id)

    def approve(self, *, current_role: Role, request_id: int, actor_id: Optional[int] = None) -> LeaveRequest:
        return self.action(current_role=current_role, request_id=request_id, new_status=LeaveStatus.APPROVED, actor_id=actor_id)

    def reject(self, *, current_role: Role, request_id: int, actor_id: Optional[int] = None) -> LeaveRequest:
        return self.action(current_role=current_role, request_id=request_id, new_status=LeaveStatus.REJECTED, actor_id=actor_id)

    def _publish(self, event: LeaveActioned) -> None:
        if not self._feed:
            return
        try:
            self._feed.publish(event)
        except Exception:
            # The transition is already committed; a lost notification must not undo it.
            logger.exception("activity feed rejected event for leave %s", event.request_id)

    def get_request(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get_request(int(request_id))
        if not req:
            raise NotFoundError("Leave request not found")
        return req

    def list_my_requests(self, *, employee_id: int) -> Sequence[LeaveRequest]:
        return self._leaves.list_requests(employee_id=int(employee_id), limit=DEFAULT_LIST_LIMIT)

    def list_all_requests(self, *, current_role: Role, status=None) -> Sequence[LeaveRequest]:
        require_role(current_role, APPROVER_ROLES)
        status = require_enum(LeaveStatus, status, "Status") if status else None
        return self._leaves.list_requests(status=status, limit=DEFAULT_LIST_LIMIT)

    def get_balances(self, *, employee_id: int) -> Sequence[LeaveBalanceItem]:
        return self._leaves.list_balances(employee_id=int(employee_id))

    def list_all_balances(self, *, current_role: Role) -> list[dict]:
        """Balances grouped per employee: ``[{"employee_id": .., "balances": [..]}]``."""
        require_role(current_role, APPROVER_ROLES)

        grouped: "OrderedDict[int, list[LeaveBalanceItem]]" = OrderedDict()
        for item in self._leaves.list_balances():
            grouped.setdefault(item.employee_id, []).append(item)
        return [{"employee_id": employee_id, "balances": items} for employee_id, items in grouped.items()]
