from __future__ import annotations

from datetime import date, datetime

import pytest

from hrms.core.enums import LeaveStatus, Role
from hrms.core.exceptions import NotFoundError
from hrms.leaves.model import LeaveActioned


def test_leave_action_lands_in_the_employee_feed(container, people):
    req = container.leave_service.submit(
        employee_id=people.employee, leave_type="Sick", start_date=date(2024, 4, 1), end_date=date(2024, 4, 2)
    )
    container.leave_service.reject(current_role=Role.MANAGER, request_id=req.request_id, actor_id=people.manager)

    feed = container.notification_service.list_mine(employee_id=people.employee)

    assert len(feed) == 1
    assert feed[0].title == "Leave Request Rejected"
    assert feed[0].message == f"Your leave request #{req.request_id} for 2 day(s) was rejected."
    assert feed[0].link == "Leave Requests"
    assert not feed[0].is_read
    assert container.notification_service.list_mine(employee_id=people.manager) == []


def test_mark_read_is_scoped_to_owner(container, people):
    n = container.notification_service.publish(
        LeaveActioned(employee_id=people.employee, request_id=1, new_status=LeaveStatus.APPROVED, days=1),
        now=datetime(2024, 3, 15, 9, 0),
    )

    with pytest.raises(NotFoundError):
        container.notification_service.mark_read(employee_id=people.manager, notification_id=n.notification_id)

    read = container.notification_service.mark_read(employee_id=people.employee, notification_id=n.notification_id)
    assert read.is_read


def test_mark_all_read(container, people):
    for request_id in (1, 2, 3):
        container.notification_service.publish(
            LeaveActioned(employee_id=people.employee, request_id=request_id, new_status=LeaveStatus.APPROVED, days=1)
        )

    assert container.notification_service.mark_all_read(employee_id=people.employee) == 3
    assert container.notification_service.mark_all_read(employee_id=people.employee) == 0
    assert all(n.is_read for n in container.notification_service.list_mine(employee_id=people.employee))
