from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one UTC calendar day.

    ``(employee_id, work_date)`` is unique. ``work_minutes`` is derived once,
    at clock-out.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    status: AttendanceStatus
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    work_minutes: Optional[int] = None
