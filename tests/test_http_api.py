from __future__ import annotations

import base64
import io
from datetime import date

import pytest
from werkzeug.security import generate_password_hash

from src.employee_management.employee_management.core.enums import Role
from src.employee_management.employee_management.main import create_app

from tests.fakes import ALICE_FACE, NO_FACE, STRANGER_FACE, make_employee


@pytest.fixture
def app(container, employees, tmp_path):
    employees.add(make_employee(7, name="Alice", email="alice@example.com",
                                password_hash=generate_password_hash("secret1")))
    employees.add(make_employee(1, name="Admin", email="admin@example.com", role=Role.ADMIN,
                                password_hash=generate_password_hash("admin123")))
    app = create_app(container=container, settings_module="config.testing")
    app.config["UPLOAD_DIR"] = str(tmp_path / "uploads")
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, email="alice@example.com", password="secret1"):
    return client.post("/auth/login", json={"email": email, "password": password})


def image_upload(data: bytes, mimetype: str = "image/jpeg"):
    return {"image": (io.BytesIO(data), "capture.jpg", mimetype)}


def test_routes_require_login(client):
    for method, path in [
        ("post", "/attendance/sign-in"),
        ("post", "/attendance/sign-out"),
        ("get", "/attendance/my/today"),
        ("get", "/attendance/my"),
        ("get", "/employees/my"),
    ]:
        resp = getattr(client, method)(path)
        assert resp.status_code == 401, path
        assert resp.get_json()["success"] is False


def test_login_me_logout(client):
    assert login(client, password="nope").status_code == 401

    resp = login(client)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["employee_id"] == 7

    assert client.get("/auth/me").get_json()["data"]["name"] == "Alice"
    client.post("/auth/logout")
    assert client.get("/auth/me").status_code == 401


def test_enroll_then_sign_in_and_out(client, attendance, tmp_path):
    login(client)

    resp = client.post("/employees/my/face-enroll", data=image_upload(ALICE_FACE),
                       content_type="multipart/form-data")
    assert resp.status_code == 200
    body = resp.get_json()["data"]
    assert body["face_image_path"].startswith("face-7-")
    assert (tmp_path / "uploads" / body["face_image_path"]).read_bytes() == ALICE_FACE
    assert client.get("/employees/my").get_json()["data"]["face_enrolled"] is True

    resp = client.post("/attendance/sign-in", data={**image_upload(ALICE_FACE), "latitude": "10.5"},
                       content_type="multipart/form-data")
    assert resp.status_code == 201
    assert resp.get_json()["data"]["latitude"] == 10.5

    encoded = base64.b64encode(ALICE_FACE).decode()
    resp = client.post("/attendance/sign-in", json={"image": f"data:image/jpeg;base64,{encoded}"})
    assert resp.status_code == 200
    assert resp.get_json()["message"] == "Already signed in today"

    today = client.get("/attendance/my/today").get_json()["data"]
    assert today["state"] == "SIGNED_IN"

    resp = client.post("/attendance/sign-out")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["sign_out_time"] is not None
    assert len(client.get("/attendance/my").get_json()["data"]) == 1


def test_sign_in_without_enrollment_points_to_enroll(client, attendance):
    login(client)
    resp = client.post("/attendance/sign-in", data=image_upload(ALICE_FACE), content_type="multipart/form-data")

    assert resp.status_code == 409
    body = resp.get_json()
    assert body["error"] == "not_enrolled"
    assert body["enroll_url"] == "/employees/my/face-enroll"
    assert attendance.all() == []


def test_face_mismatch_and_no_face(client, container, attendance):
    container.face_engine.enroll(7, ALICE_FACE)
    login(client)

    resp = client.post("/attendance/sign-in", data=image_upload(STRANGER_FACE), content_type="multipart/form-data")
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "face_mismatch"
    assert resp.get_json()["distance"] == pytest.approx(0.8)

    resp = client.post("/attendance/sign-in", data=image_upload(NO_FACE), content_type="multipart/form-data")
    assert resp.status_code == 422
    assert attendance.all() == []


def test_on_leave_maps_to_conflict(client, container, leaves):
    container.face_engine.enroll(7, ALICE_FACE)
    leaves.approve(7, date(2000, 1, 1), date(2999, 12, 31))
    login(client)

    resp = client.post("/attendance/sign-in", data=image_upload(ALICE_FACE), content_type="multipart/form-data")
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "on_leave"


def test_sign_out_without_sign_in(client):
    login(client)
    resp = client.post("/attendance/sign-out")
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "not_signed_in"


def test_upload_validation(client, app, container):
    container.face_engine.enroll(7, ALICE_FACE)
    login(client)

    resp = client.post("/attendance/sign-in", data=image_upload(ALICE_FACE, "image/gif"),
                       content_type="multipart/form-data")
    assert resp.status_code == 400

    resp = client.post("/attendance/sign-in", json={})
    assert resp.status_code == 400

    app.config["MAX_UPLOAD_BYTES"] = 4
    resp = client.post("/attendance/sign-in", data=image_upload(ALICE_FACE), content_type="multipart/form-data")
    assert resp.status_code == 413

    resp = client.post("/employees/my/face-enroll", data={}, content_type="multipart/form-data")
    assert resp.status_code == 400


def test_failed_enrollment_leaves_no_file(client, tmp_path):
    login(client)
    resp = client.post("/employees/my/face-enroll", data=image_upload(NO_FACE), content_type="multipart/form-data")

    assert resp.status_code == 422
    assert list((tmp_path / "uploads").glob("*")) == []


def test_re_enrollment_removes_the_replaced_photo(client, employees, tmp_path):
    login(client)
    first = client.post("/employees/my/face-enroll", data=image_upload(ALICE_FACE),
                        content_type="multipart/form-data").get_json()["data"]["face_image_path"]
    second = client.post("/employees/my/face-enroll", data=image_upload(ALICE_FACE, "image/png"),
                         content_type="multipart/form-data").get_json()["data"]["face_image_path"]

    assert first != second
    assert [p.name for p in (tmp_path / "uploads").glob("*")] == [second]
    assert employees.get_face_profile(7).image_path == second


def test_failed_re_enrollment_keeps_the_current_photo(client, tmp_path):
    login(client)
    first = client.post("/employees/my/face-enroll", data=image_upload(ALICE_FACE),
                        content_type="multipart/form-data").get_json()["data"]["face_image_path"]

    resp = client.post("/employees/my/face-enroll", data=image_upload(NO_FACE), content_type="multipart/form-data")

    assert resp.status_code == 422
    assert [p.name for p in (tmp_path / "uploads").glob("*")] == [first]


def test_admin_listing(client, container):
    container.attendance_service.sign_in(7)
    login(client)
    assert client.get("/attendance").status_code == 403

    client.post("/auth/logout")
    login(client, "admin@example.com", "admin123")

    resp = client.get("/attendance")
    assert resp.status_code == 200
    rows = resp.get_json()["data"]
    assert [r["employee"]["name"] for r in rows] == ["Alice"]

    assert client.get("/attendance?month=13").status_code == 400
    assert client.get("/attendance?year=1999").get_json()["data"] == []


def test_unexpected_errors_are_generic(client, container, monkeypatch):
    login(client)

    def boom(*args, **kwargs):
        raise RuntimeError("database exploded")

    monkeypatch.setattr(container.attendance_service, "sign_out", boom)
    resp = client.post("/attendance/sign-out")

    assert resp.status_code == 500
    assert resp.get_json()["message"] == "Internal server error"
    assert "exploded" not in resp.get_data(as_text=True)
