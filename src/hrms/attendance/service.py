from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import as_utc, now_utc, whole_minutes_between
from ..common.validators import require_enum, require_role
from ..core.constants import APPROVER_ROLES, DEFAULT_HISTORY_LIMIT, HR_ROLES
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import (
    AlreadyClockedInError,
    AlreadyClockedOutError,
    InvalidRangeError,
    NotClockedInError,
    NotFoundError,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Time ledger: clock events per UTC day and the absence counts payroll reads."""

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def _require_active(self, employee_id: int) -> None:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        if not employee.is_active:
            raise ValidationError("Employee is inactive")

    def _get(self, employee_id: int, work_date: date) -> AttendanceRecord:
        record = self._attendance.get_for_employee_and_date(int(employee_id), work_date)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def clock_in(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = as_utc(now or now_utc())
        today = now.date()

        self._require_active(employee_id)

        existing = self._attendance.get_for_employee_and_date(int(employee_id), today)
        if existing and existing.clock_in is not None:
            raise AlreadyClockedInError("Already clocked in today")

        if not self._attendance.record_clock_in(employee_id=int(employee_id), work_date=today, clock_in=now):
            raise AlreadyClockedInError("Already clocked in today")

        logger.info("employee %s clocked in at %s", employee_id, now.isoformat())
        return self._get(employee_id, today)

    def clock_out(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = as_utc(now or now_utc())
        today = now.date()

        record = self._attendance.get_for_employee_and_date(int(employee_id), today)
        if not record or record.clock_in is None:
            raise NotClockedInError("You have not clocked in today")
        if record.clock_out is not None:
            raise AlreadyClockedOutError("Already clocked out today")

        minutes = whole_minutes_between(record.clock_in, now)
        if not self._attendance.record_clock_out(attendance_id=record.attendance_id, clock_out=now, work_minutes=minutes):
            raise AlreadyClockedOutError("Already clocked out today")

        logger.info("employee %s clocked out after %d minutes", employee_id, minutes)
        return self._get(employee_id, today)

    def set_status(self, *, current_role: Role, employee_id: int, work_date: date, status) -> AttendanceRecord:
        """Administrative override; idempotent and independent of clock times."""
        require_role(current_role, HR_ROLES)
        status = require_enum(AttendanceStatus, status, "Status")

        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")

        self._attendance.upsert_status(employee_id=int(employee_id), work_date=work_date, status=status)
        logger.info("attendance of employee %s on %s set to %s", employee_id, work_date, status.value)
        return self._get(employee_id, work_date)

    def count_absences(self, employee_id: int, start_date: date, end_date: date) -> int:
        """Days marked ABSENT in [start_date, end_date]."""
        if end_date < start_date:
            raise InvalidRangeError("End date must be on or after start date")
        return self._attendance.count_status(
            employee_id=int(employee_id),
            start_date=start_date,
            end_date=end_date,
            status=AttendanceStatus.ABSENT,
        )

    def get_today_record(self, employee_id: int, *, today: Optional[date] = None) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(int(employee_id), today or now_utc().date())

    def get_history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_employee(int(employee_id), int(limit))

    def list_range(
        self,
        *,
        current_role: Role,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        require_role(current_role, APPROVER_ROLES)
        if end_date < start_date:
            raise InvalidRangeError("End date must be on or after start date")
        return self._attendance.list_range(start_date=start_date, end_date=end_date, employee_id=employee_id)
