from __future__ import annotations

import itertools
import threading
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest
from werkzeug.security import generate_password_hash

from hrms.attendance.model import AttendanceRecord
from hrms.container import assemble
from hrms.core.constants import DEFAULT_LEAVE_ENTITLEMENTS
from hrms.core.enums import AttendanceStatus, EmployeeStatus, LeaveStatus, PayrollStatus, Role
from hrms.core.exceptions import ValidationError
from hrms.employees.model import Department, Employee
from hrms.holidays.model import Holiday
from hrms.leaves.model import LeaveBalanceItem, LeaveRequest
from hrms.notifications.model import Notification
from hrms.payroll.model import PayrollRecord

PASSWORD = "password123"
# Cheap hash so the suite stays fast.
PASSWORD_HASH = generate_password_hash(PASSWORD, method="pbkdf2:sha256:1000")

ADMIN_ID, HR_ID, MANAGER_ID, EMPLOYEE_ID = 1, 2, 3, 4


class FakeEmployeesRepo:
    def __init__(self, leaves=None):
        self._lock = threading.Lock()
        self._leaves = leaves
        self._ids = itertools.count(1)
        self.rows: dict[int, Employee] = {}

    def add(self, *, full_name, email, role, annual_salary=None, status=EmployeeStatus.ACTIVE, department_id=None):
        with self._lock:
            employee_id = next(self._ids)
            self.rows[employee_id] = Employee(
                employee_id=employee_id,
                full_name=full_name,
                email=email,
                password_hash=PASSWORD_HASH,
                role=role,
                department_id=department_id,
                status=status,
                annual_salary=Decimal(str(annual_salary)) if annual_salary is not None else None,
            )
            return employee_id

    def get_by_id(self, employee_id):
        return self.rows.get(int(employee_id))

    def get_by_email(self, email):
        return next((e for e in self.rows.values() if e.email == email), None)

    def list_all(self):
        return [self.rows[k] for k in sorted(self.rows)]

    def list_active(self):
        return [e for e in self.list_all() if e.is_active]

    def create_employee(
        self, *, full_name, email, password_hash, role, department_id, employee_type, annual_salary, joined_on, entitlements
    ):
        with self._lock:
            if any(e.email == email for e in self.rows.values()):
                raise ValidationError("Email is already registered")
            employee_id = next(self._ids)
            self.rows[employee_id] = Employee(
                employee_id=employee_id,
                full_name=full_name,
                email=email,
                password_hash=password_hash,
                role=role,
                department_id=department_id,
                employee_type=employee_type,
                annual_salary=annual_salary,
                joined_on=joined_on,
            )
            if self._leaves is not None:
                self._leaves.open_balances(employee_id=employee_id, entitlements=entitlements)
            return employee_id

    def set_status(self, employee_id, *, status):
        with self._lock:
            employee = self.rows.get(int(employee_id))
            if not employee:
                return False
            self.rows[employee.employee_id] = replace(employee, status=status)
            return True


class FakeDepartmentsRepo:
    def __init__(self):
        self.rows = [Department(1, "Human Resources"), Department(2, "Engineering", manager_id=MANAGER_ID)]

    def list_all(self):
        return list(self.rows)


class FakeAttendanceRepo:
    """Same contracts as the MySQL repository; one lock stands in for row locks."""

    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self.rows: dict[tuple, AttendanceRecord] = {}

    def get_for_employee_and_date(self, employee_id, work_date):
        return self.rows.get((int(employee_id), work_date))

    def list_for_employee(self, employee_id, limit):
        rows = [r for r in self.rows.values() if r.employee_id == int(employee_id)]
        return sorted(rows, key=lambda r: r.work_date, reverse=True)[: int(limit)]

    def list_range(self, *, start_date, end_date, employee_id=None):
        rows = [
            r
            for r in self.rows.values()
            if start_date <= r.work_date <= end_date and (employee_id is None or r.employee_id == int(employee_id))
        ]
        return sorted(rows, key=lambda r: (-r.work_date.toordinal(), r.employee_id))

    def record_clock_in(self, *, employee_id, work_date, clock_in):
        with self._lock:
            key = (int(employee_id), work_date)
            row = self.rows.get(key)
            if row is None:
                row = AttendanceRecord(next(self._ids), int(employee_id), work_date, AttendanceStatus.NOT_MARKED)
            if row.clock_in is not None:
                return False
            self.rows[key] = replace(row, clock_in=clock_in, status=AttendanceStatus.PRESENT)
            return True

    def record_clock_out(self, *, attendance_id, clock_out, work_minutes):
        with self._lock:
            for key, row in self.rows.items():
                if row.attendance_id == int(attendance_id):
                    if row.clock_in is None or row.clock_out is not None:
                        return False
                    self.rows[key] = replace(row, clock_out=clock_out, work_minutes=int(work_minutes))
                    return True
            return False

    def upsert_status(self, *, employee_id, work_date, status):
        with self._lock:
            key = (int(employee_id), work_date)
            row = self.rows.get(key) or AttendanceRecord(next(self._ids), int(employee_id), work_date, status)
            self.rows[key] = replace(row, status=status)

    def count_status(self, *, employee_id, start_date, end_date, status):
        return sum(
            1
            for r in self.rows.values()
            if r.employee_id == int(employee_id) and r.status == status and start_date <= r.work_date <= end_date
        )


class FakeLeavesRepo:
    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self.requests: dict[int, LeaveRequest] = {}
        self.balances: dict[tuple, LeaveBalanceItem] = {}

    def get_request(self, request_id):
        return self.requests.get(int(request_id))

    def list_requests(self, *, employee_id=None, status=None, limit=500):
        rows = [
            r
            for r in self.requests.values()
            if (employee_id is None or r.employee_id == int(employee_id)) and (status is None or r.status == status)
        ]
        return sorted(rows, key=lambda r: (r.start_date, r.request_id), reverse=True)[: int(limit)]

    def get_balance(self, employee_id, leave_type):
        return self.balances.get((int(employee_id), leave_type))

    def list_balances(self, *, employee_id=None):
        keys = sorted(self.balances, key=lambda k: (k[0], k[1].value))
        return [self.balances[k] for k in keys if employee_id is None or k[0] == int(employee_id)]

    def open_balances(self, *, employee_id, entitlements):
        with self._lock:
            for leave_type, total in entitlements.items():
                key = (int(employee_id), leave_type)
                if key not in self.balances:
                    self.balances[key] = LeaveBalanceItem(int(employee_id), leave_type, int(total), 0, 0)

    def create_pending(self, *, employee_id, leave_type, start_date, end_date, days, reason, created_at, enforce_ceiling):
        with self._lock:
            key = (int(employee_id), leave_type)
            balance = self.balances.get(key)
            if enforce_ceiling:
                if balance is None or balance.available < days:
                    return None
                self.balances[key] = replace(balance, pending=balance.pending + days)
            elif balance is None:
                self.balances[key] = LeaveBalanceItem(int(employee_id), leave_type, 0, 0, days)
            else:
                self.balances[key] = replace(balance, pending=balance.pending + days)

            request_id = next(self._ids)
            self.requests[request_id] = LeaveRequest(
                request_id=request_id,
                employee_id=int(employee_id),
                leave_type=leave_type,
                start_date=start_date,
                end_date=end_date,
                days=days,
                reason=reason,
                status=LeaveStatus.PENDING,
                created_at=created_at,
            )
            return request_id

    def decide(self, *, request_id, status, decided_by, decided_at):
        with self._lock:
            req = self.requests.get(int(request_id))
            if not req or req.status != LeaveStatus.PENDING:
                return False
            key = (req.employee_id, req.leave_type)
            balance = self.balances.get(key)
            if balance is None:
                raise RuntimeError(f"Leave balance missing for request {request_id}")

            self.requests[req.request_id] = replace(req, status=status, decided_by=decided_by, decided_at=decided_at)
            used_delta = req.days if status == LeaveStatus.APPROVED else 0
            self.balances[key] = replace(balance, pending=balance.pending - req.days, used=balance.used + used_delta)
            return True


class FakePayrollRepo:
    def __init__(self):
        self._lock = threading.RLock()
        self._ids = itertools.count(1)
        self.rows: dict[int, PayrollRecord] = {}

    def exists_for_period(self, *, month, year):
        with self._lock:
            return any(r.month == month and r.year == year for r in self.rows.values())

    def create_period(self, *, month, year, payslips, generated_at):
        with self._lock:
            if self.exists_for_period(month=month, year=year):
                return None
            ids = []
            for employee_id, slip in payslips:
                payroll_id = next(self._ids)
                self.rows[payroll_id] = PayrollRecord(
                    payroll_id=payroll_id,
                    employee_id=int(employee_id),
                    month=month,
                    year=year,
                    basic=slip.basic,
                    hra=slip.hra,
                    special=slip.special,
                    tax=slip.tax,
                    provident_fund=slip.provident_fund,
                    absence_deduction=slip.absence_deduction,
                    gross_pay=slip.gross_pay,
                    net_pay=slip.net_pay,
                    status=PayrollStatus.GENERATED,
                    generated_at=generated_at,
                    absent_days=slip.absent_days,
                )
                ids.append(payroll_id)
            return ids

    def get(self, payroll_id):
        return self.rows.get(int(payroll_id))

    def list_records(self, *, employee_id=None, month=None, year=None):
        with self._lock:
            snapshot = list(self.rows.values())
        rows = [
            r
            for r in snapshot
            if (employee_id is None or r.employee_id == int(employee_id))
            and (month is None or r.month == int(month))
            and (year is None or r.year == int(year))
        ]
        return sorted(rows, key=lambda r: (-r.year, -r.month, r.employee_id))

    def mark_paid(self, *, payroll_id, paid_at):
        with self._lock:
            record = self.rows.get(int(payroll_id))
            if not record:
                return False
            self.rows[record.payroll_id] = replace(record, status=PayrollStatus.PAID, paid_at=record.paid_at or paid_at)
            return True


class FakeNotificationsRepo:
    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self.rows: dict[int, Notification] = {}

    def get(self, notification_id):
        return self.rows.get(int(notification_id))

    def create(self, *, employee_id, title, message, link, created_at):
        with self._lock:
            notification_id = next(self._ids)
            self.rows[notification_id] = Notification(notification_id, int(employee_id), title, message, False, created_at, link)
            return notification_id

    def list_for_employee(self, employee_id, *, limit):
        rows = [n for n in self.rows.values() if n.employee_id == int(employee_id)]
        return sorted(rows, key=lambda n: (n.created_at, n.notification_id), reverse=True)[: int(limit)]

    def mark_read(self, *, notification_id, employee_id):
        with self._lock:
            n = self.rows.get(int(notification_id))
            if not n or n.employee_id != int(employee_id):
                return False
            self.rows[n.notification_id] = replace(n, is_read=True)
            return True

    def mark_all_read(self, *, employee_id):
        with self._lock:
            unread = [n for n in self.rows.values() if n.employee_id == int(employee_id) and not n.is_read]
            for n in unread:
                self.rows[n.notification_id] = replace(n, is_read=True)
            return len(unread)


class FakeHolidaysRepo:
    def __init__(self):
        self._ids = itertools.count(1)
        self.rows: dict[int, Holiday] = {}

    def get(self, holiday_id):
        return self.rows.get(int(holiday_id))

    def list_all(self):
        return sorted(self.rows.values(), key=lambda h: (h.holiday_date, h.holiday_id))

    def create(self, *, holiday_date, name, description, is_optional):
        holiday_id = next(self._ids)
        self.rows[holiday_id] = Holiday(holiday_id, holiday_date, name, description, is_optional)
        return holiday_id

    def update(self, holiday_id, *, holiday_date, name, description, is_optional):
        if int(holiday_id) not in self.rows:
            return False
        self.rows[int(holiday_id)] = Holiday(int(holiday_id), holiday_date, name, description, is_optional)
        return True

    def delete(self, holiday_id):
        return self.rows.pop(int(holiday_id), None) is not None


@pytest.fixture
def fixed_now():
    return datetime(2024, 3, 15, 9, 0, 0)


@pytest.fixture
def repos():
    leaves = FakeLeavesRepo()
    employees = FakeEmployeesRepo(leaves)

    employees.add(full_name="Admin User", email="admin@hrms.com", role=Role.ADMIN, annual_salary=120000)
    employees.add(full_name="HR Head", email="hr@hrms.com", role=Role.HR, annual_salary=95000)
    employees.add(full_name="Mike Johnson", email="manager@hrms.com", role=Role.MANAGER, annual_salary=110000, department_id=2)
    employees.add(full_name="Sarah Lee", email="employee@hrms.com", role=Role.EMPLOYEE, annual_salary=120000, department_id=2)
    for employee_id in (ADMIN_ID, HR_ID, MANAGER_ID, EMPLOYEE_ID):
        leaves.open_balances(employee_id=employee_id, entitlements=DEFAULT_LEAVE_ENTITLEMENTS)

    return SimpleNamespace(
        employees=employees,
        departments=FakeDepartmentsRepo(),
        attendance=FakeAttendanceRepo(),
        leaves=leaves,
        payroll=FakePayrollRepo(),
        notifications=FakeNotificationsRepo(),
        holidays=FakeHolidaysRepo(),
    )


@pytest.fixture
def container(repos):
    return assemble(
        conn=None,
        employees_repo=repos.employees,
        departments_repo=repos.departments,
        attendance_repo=repos.attendance,
        leaves_repo=repos.leaves,
        payroll_repo=repos.payroll,
        notifications_repo=repos.notifications,
        holidays_repo=repos.holidays,
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from hrms.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def people():
    return SimpleNamespace(admin=ADMIN_ID, hr=HR_ID, manager=MANAGER_ID, employee=EMPLOYEE_ID)


@pytest.fixture
def login(client):
    """Put an identity in the signed session cookie, as the login route would."""

    def _login(employee_id: int, role: Role) -> None:
        with client.session_transaction() as sess:
            sess["user_id"] = employee_id
            sess["role"] = role.value

    return _login
