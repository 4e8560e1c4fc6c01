from __future__ import annotations

import threading
from datetime import date, datetime
from decimal import Decimal

import pytest

from hrms.attendance.service import AttendanceService
from hrms.core.enums import AttendanceStatus, EmployeeStatus, PayrollStatus, Role
from hrms.core.exceptions import AlreadyGeneratedError, AuthorizationError, NotFoundError, ValidationError
from hrms.payroll.service import PayrollService


@pytest.fixture
def attendance(repos):
    return AttendanceService(repos.attendance, repos.employees)


@pytest.fixture
def service(repos, attendance):
    return PayrollService(repos.payroll, repos.employees, attendance)


def test_generate_creates_one_record_per_active_employee(service, repos, people, fixed_now):
    records = service.generate(current_role=Role.HR, month=3, year=2024, now=fixed_now)

    assert sorted(r.employee_id for r in records) == [people.admin, people.hr, people.manager, people.employee]
    assert all(r.status == PayrollStatus.GENERATED for r in records)
    assert all(r.generated_at == fixed_now for r in records)

    mine = next(r for r in records if r.employee_id == people.employee)
    assert mine.net_pay == Decimal("8900.00")


def test_absences_in_the_month_reduce_net_pay(service, attendance, people):
    for day in (date(2024, 3, 4), date(2024, 3, 5), date(2024, 4, 1)):
        attendance.set_status(current_role=Role.HR, employee_id=people.employee, work_date=day, status="Absent")
    attendance.set_status(
        current_role=Role.HR, employee_id=people.employee, work_date=date(2024, 3, 6), status=AttendanceStatus.LEAVE
    )

    records = service.generate(current_role=Role.ADMIN, month=3, year=2024)

    mine = next(r for r in records if r.employee_id == people.employee)
    assert mine.absent_days == 2
    assert mine.absence_deduction == Decimal("909.09")
    assert mine.net_pay == Decimal("7990.91")


def test_second_run_for_same_period_creates_nothing(service, repos):
    service.generate(current_role=Role.HR, month=3, year=2024)
    before = dict(repos.payroll.rows)

    with pytest.raises(AlreadyGeneratedError):
        service.generate(current_role=Role.HR, month=3, year=2024)

    assert repos.payroll.rows == before


def test_other_periods_are_independent(service, repos):
    service.generate(current_role=Role.HR, month=3, year=2024)
    service.generate(current_role=Role.HR, month=4, year=2024)

    assert len(repos.payroll.rows) == 8


def test_concurrent_runs_generate_the_period_once(service, repos):
    barrier = threading.Barrier(6)
    outcomes = []

    def worker():
        barrier.wait()
        try:
            service.generate(current_role=Role.HR, month=3, year=2024)
            outcomes.append("ok")
        except AlreadyGeneratedError:
            outcomes.append("dup")

    threads = [threading.Thread(target=worker) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert len(repos.payroll.rows) == 4


def test_inactive_and_unsalaried_employees_are_skipped(service, repos, people):
    repos.employees.set_status(people.manager, status=EmployeeStatus.INACTIVE)
    repos.employees.add(full_name="New Intern", email="intern@hrms.com", role=Role.EMPLOYEE)

    records = service.generate(current_role=Role.HR, month=3, year=2024)

    assert sorted(r.employee_id for r in records) == [people.admin, people.hr, people.employee]


def test_bad_salary_aborts_whole_run(service, repos):
    repos.employees.add(full_name="Broken", email="broken@hrms.com", role=Role.EMPLOYEE, annual_salary=-1)

    with pytest.raises(ValidationError):
        service.generate(current_role=Role.HR, month=3, year=2024)

    assert repos.payroll.rows == {}


def test_generate_requires_payroll_role(service):
    with pytest.raises(AuthorizationError):
        service.generate(current_role=Role.MANAGER, month=3, year=2024)


def test_generate_validates_period(service):
    with pytest.raises(ValidationError):
        service.generate(current_role=Role.HR, month=13, year=2024)


def test_mark_paid(service, people):
    records = service.generate(current_role=Role.HR, month=3, year=2024)
    target = records[0]

    paid = service.mark_paid(current_role=Role.HR, payroll_id=target.payroll_id, now=datetime(2024, 4, 1, 8, 0))
    again = service.mark_paid(current_role=Role.HR, payroll_id=target.payroll_id, now=datetime(2024, 4, 2, 8, 0))

    assert paid.status == PayrollStatus.PAID
    assert again.status == PayrollStatus.PAID
    assert again.paid_at == datetime(2024, 4, 1, 8, 0)


def test_mark_paid_missing_record(service):
    with pytest.raises(NotFoundError):
        service.mark_paid(current_role=Role.HR, payroll_id=999)


def test_listings(service, people):
    service.generate(current_role=Role.HR, month=3, year=2024)
    service.generate(current_role=Role.HR, month=4, year=2024)

    mine = service.list_mine(employee_id=people.employee)
    assert [(r.month, r.year) for r in mine] == [(4, 2024), (3, 2024)]
    assert len(service.list_all(current_role=Role.ADMIN, month=3, year=2024)) == 4

    with pytest.raises(AuthorizationError):
        service.list_all(current_role=Role.EMPLOYEE)
