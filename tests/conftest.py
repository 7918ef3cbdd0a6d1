from __future__ import annotations

from datetime import datetime

import pytest

from src.employee_management.employee_management.container import assemble

from tests.fakes import (
    ALICE_FACE,
    STRANGER_FACE,
    FakeEncoder,
    InMemoryAttendance,
    InMemoryEmployees,
    InMemoryLeaves,
    descriptor,
    make_employee,
)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 4, 9, 0, 0)


@pytest.fixture
def employees():
    return InMemoryEmployees([make_employee(7, name="Alice"), make_employee(9, name="Bob")])


@pytest.fixture
def leaves():
    return InMemoryLeaves()


@pytest.fixture
def attendance(employees):
    return InMemoryAttendance(employees)


@pytest.fixture
def encoder():
    return FakeEncoder(
        {
            ALICE_FACE: descriptor(0.1),
            STRANGER_FACE: descriptor(0.1, first=0.9),
        }
    )


@pytest.fixture
def container(employees, leaves, attendance, encoder):
    return assemble(
        employees_repo=employees,
        faces_repo=employees,
        leaves_repo=leaves,
        attendance_repo=attendance,
        encoder=encoder,
        face_match_threshold=0.45,
    )
