from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles supplied by the session; used for permission checks."""

    ADMIN = "Admin"
    HR = "HR"
    MANAGER = "Manager"
    EMPLOYEE = "Employee"


class EmployeeStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class EmployeeType(str, Enum):
    PERMANENT = "Permanent"
    CONTRACT = "Contract"
    INTERN = "Intern"


class AttendanceStatus(str, Enum):
    """Per-day attendance status stored in the database."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LEAVE = "Leave"
    HALF_DAY = "Half-Day"
    NOT_MARKED = "Not Marked"


class LeaveType(str, Enum):
    ANNUAL = "Annual"
    SICK = "Sick"
    CASUAL = "Casual"
    UNPAID = "Unpaid"

    @property
    def is_paid(self) -> bool:
        return self is not LeaveType.UNPAID


class LeaveStatus(str, Enum):
    """Leave request workflow: PENDING -> APPROVED | REJECTED."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class PayrollStatus(str, Enum):
    GENERATED = "Generated"
    PAID = "Paid"
