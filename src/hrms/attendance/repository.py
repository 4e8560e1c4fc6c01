from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_range(self, *, start_date: date, end_date: date, employee_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def record_clock_in(self, *, employee_id: int, work_date: date, clock_in: datetime) -> bool:
        """Set clock_in and PRESENT on the day's row, creating it if missing.

        Atomic upsert; returns False if the row already had a clock_in.
        """

        raise NotImplementedError

    def record_clock_out(self, *, attendance_id: int, clock_out: datetime, work_minutes: int) -> bool:
        """Set clock_out/work_minutes only if clock_out is still empty."""

        raise NotImplementedError

    def upsert_status(self, *, employee_id: int, work_date: date, status: AttendanceStatus) -> None:
        """Admin override of the day's status. Clock timestamps are left as they are."""

        raise NotImplementedError

    def count_status(self, *, employee_id: int, start_date: date, end_date: date, status: AttendanceStatus) -> int:
        raise NotImplementedError
