from __future__ import annotations

from datetime import date

import pytest
from werkzeug.security import generate_password_hash

from src.employee_management.employee_management.core.enums import LeaveStatus, Role
from src.employee_management.employee_management.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    ValidationError,
)
from src.employee_management.employee_management.employees.service import AuthService, EmployeeService
from src.employee_management.employee_management.leaves.model import LeaveRequest
from src.employee_management.employee_management.leaves.service import LeaveCalendar

from tests.fakes import InMemoryEmployees, InMemoryLeaves, make_employee


@pytest.fixture
def directory():
    return InMemoryEmployees(
        [
            make_employee(1, name="Admin", email="admin@example.com", role=Role.ADMIN,
                          password_hash=generate_password_hash("admin123")),
            make_employee(7, name="Alice", email="alice@example.com",
                          password_hash=generate_password_hash("secret1")),
            make_employee(8, name="Gone", email="gone@example.com", is_active=False,
                          password_hash=generate_password_hash("secret1")),
            make_employee(9, name="Legacy", email="legacy@example.com", password_hash="CHANGE_ME"),
        ]
    )


def test_authenticate_by_email(directory):
    user = AuthService(directory).authenticate("  Alice@Example.com ", "secret1")
    assert (user.employee_id, user.name, user.role) == (7, "Alice", Role.EMPLOYEE)


@pytest.mark.parametrize(
    "email,password",
    [
        ("alice@example.com", "wrong"),
        ("nobody@example.com", "secret1"),
        ("gone@example.com", "secret1"),
        ("legacy@example.com", "CHANGE_ME"),
        ("", ""),
    ],
)
def test_authenticate_failures_share_one_message(directory, email, password):
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        AuthService(directory).authenticate(email, password)


def test_employee_service_profile_and_active_check(directory):
    service = EmployeeService(directory)

    assert service.get_profile(7).to_dict()["face_enrolled"] is False
    assert service.require_active(7).employee_id == 7
    with pytest.raises(ValidationError):
        service.require_active(8)
    with pytest.raises(NotFoundError):
        service.get_profile(404)


def test_leave_calendar_covers_inclusive_range():
    leaves = InMemoryLeaves()
    leaves.approve(7, date(2024, 3, 4), date(2024, 3, 6))
    calendar = LeaveCalendar(leaves)

    assert not calendar.is_on_leave(7, date(2024, 3, 3))
    assert calendar.is_on_leave(7, date(2024, 3, 4))
    assert calendar.is_on_leave(7, date(2024, 3, 6))
    assert not calendar.is_on_leave(7, date(2024, 3, 7))
    assert not calendar.is_on_leave(9, date(2024, 3, 5))


def test_only_approved_full_day_leave_counts():
    pending = LeaveRequest(
        leave_request_id=1,
        employee_id=7,
        leave_type_id=1,
        start_date=date(2024, 3, 4),
        end_date=date(2024, 3, 4),
        leave_status=LeaveStatus.PENDING,
    )
    leaves = InMemoryLeaves([pending])
    leaves.approve(7, date(2024, 3, 5), date(2024, 3, 5), half_day=True)
    calendar = LeaveCalendar(leaves)

    assert not calendar.is_on_leave(7, date(2024, 3, 4))
    assert not calendar.is_on_leave(7, date(2024, 3, 5))
