from __future__ import annotations

from datetime import date

import pytest

from src.employee_management.employee_management.attendance.model import AlreadySignedIn, Created, Rejected
from src.employee_management.employee_management.attendance.sign_in import FaceSignInFlow
from src.employee_management.employee_management.core.exceptions import (
    FaceMismatch,
    NoFaceDetected,
    NotEnrolled,
    OnLeave,
    ValidationError,
)

from tests.fakes import ALICE_FACE, NO_FACE, STRANGER_FACE, descriptor


@pytest.fixture
def enrolled(container):
    container.face_engine.enroll(7, ALICE_FACE)
    return container


def test_matching_face_signs_in(enrolled, attendance, fixed_now):
    result = enrolled.sign_in_flow.sign_in(7, now=fixed_now, frame=ALICE_FACE, latitude=10.0, longitude=20.0)

    assert isinstance(result, Created)
    assert result.record.sign_in_time == fixed_now
    assert result.record.latitude == 10.0
    assert len(attendance.all()) == 1


def test_repeat_face_sign_in_is_already_signed_in(enrolled, fixed_now):
    enrolled.sign_in_flow.sign_in(7, now=fixed_now, frame=ALICE_FACE)
    result = enrolled.sign_in_flow.sign_in(7, now=fixed_now.replace(hour=11), frame=ALICE_FACE)

    assert isinstance(result, AlreadySignedIn)
    assert result.record.sign_in_time == fixed_now


def test_mismatch_is_rejected_without_writing(enrolled, attendance, fixed_now):
    result = enrolled.sign_in_flow.sign_in(7, now=fixed_now, frame=STRANGER_FACE)

    assert isinstance(result, Rejected)
    assert isinstance(result.error, FaceMismatch)
    assert result.reason == "face_mismatch"
    assert result.error.distance == pytest.approx(0.8)
    assert attendance.all() == []


def test_no_face_in_frame_is_rejected(enrolled, attendance, fixed_now):
    result = enrolled.sign_in_flow.sign_in(7, now=fixed_now, frame=NO_FACE)

    assert isinstance(result, Rejected)
    assert isinstance(result.error, NoFaceDetected)
    assert attendance.all() == []


def test_employee_without_enrollment_is_rejected(container, attendance, fixed_now):
    # Employee 9 has never enrolled a face.
    result = container.sign_in_flow.sign_in(9, now=fixed_now, frame=ALICE_FACE)

    assert isinstance(result, Rejected)
    assert isinstance(result.error, NotEnrolled)
    assert attendance.all() == []


def test_leave_gate_runs_before_face_check(container, leaves, attendance, encoder, fixed_now):
    # Employee 9 is on leave and not enrolled: leave wins.
    leaves.approve(9, date(2024, 3, 4), date(2024, 3, 4))

    result = container.sign_in_flow.sign_in(9, now=fixed_now, frame=ALICE_FACE)

    assert isinstance(result, Rejected)
    assert isinstance(result.error, OnLeave)
    assert encoder.calls == 0
    assert attendance.all() == []


def test_leave_refuses_even_a_matching_face(enrolled, leaves, attendance, fixed_now):
    leaves.approve(7, date(2024, 3, 1), date(2024, 3, 10))

    result = enrolled.sign_in_flow.sign_in(7, now=fixed_now, frame=ALICE_FACE)

    assert isinstance(result, Rejected)
    assert result.reason == "on_leave"
    assert attendance.all() == []


def test_missing_capture_is_a_validation_error(enrolled, fixed_now):
    with pytest.raises(ValidationError):
        enrolled.sign_in_flow.sign_in(7, now=fixed_now)


def test_client_descriptor_requires_opt_in(enrolled, fixed_now):
    with pytest.raises(ValidationError):
        enrolled.sign_in_flow.sign_in(7, now=fixed_now, descriptor=descriptor(0.1))

    flow = FaceSignInFlow(enrolled.attendance_service, enrolled.face_engine, allow_client_descriptors=True)
    assert isinstance(flow.sign_in(7, now=fixed_now, descriptor=descriptor(0.1)), Created)


def test_face_check_can_be_disabled(container, attendance, fixed_now):
    flow = FaceSignInFlow(container.attendance_service, container.face_engine, face_required=False)

    assert isinstance(flow.sign_in(9, now=fixed_now), Created)
    assert len(attendance.all()) == 1
