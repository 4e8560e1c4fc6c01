from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_CONFLICT_RETRIES
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_department_repository import MySQLDepartmentRepository
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import DepartmentRepository, EmployeeRepository
from .employees.service import AuthService, DirectoryService
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .holidays.service import HolidayService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .payroll.calculator.standard_calculator import PayrollPolicy, StandardPayrollCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    departments_repo: DepartmentRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    payroll_repo: PayrollRepository
    notifications_repo: NotificationRepository
    holidays_repo: HolidayRepository

    auth_service: AuthService
    directory_service: DirectoryService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService
    notification_service: NotificationService
    holiday_service: HolidayService


def assemble(
    *,
    conn: Optional[DatabaseConnection],
    employees_repo: EmployeeRepository,
    departments_repo: DepartmentRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    payroll_repo: PayrollRepository,
    notifications_repo: NotificationRepository,
    holidays_repo: HolidayRepository,
    payroll_policy: Optional[PayrollPolicy] = None,
) -> Container:
    """Wire services on top of whatever repositories are given (MySQL or in-memory)."""
    notification_service = NotificationService(notifications_repo)
    attendance_service = AttendanceService(attendance_repo, employees_repo)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        departments_repo=departments_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payroll_repo=payroll_repo,
        notifications_repo=notifications_repo,
        holidays_repo=holidays_repo,
        auth_service=AuthService(employees_repo),
        directory_service=DirectoryService(employees_repo, departments_repo),
        attendance_service=attendance_service,
        leave_service=LeaveService(leaves_repo, feed=notification_service),
        payroll_service=PayrollService(
            payroll_repo,
            employees_repo,
            attendance_service,
            calculator=StandardPayrollCalculator(payroll_policy),
        ),
        notification_service=notification_service,
        holiday_service=HolidayService(holidays_repo),
    )


def build_container(
    *,
    db_config: dict,
    conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
    payroll_policy: Optional[Mapping[str, object]] = None,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config, conflict_retries=conflict_retries)

    return assemble(
        conn=conn,
        employees_repo=MySQLEmployeeRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        payroll_policy=PayrollPolicy.from_settings(payroll_policy),
    )
