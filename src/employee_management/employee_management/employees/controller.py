from __future__ import annotations

import logging
import uuid
from datetime import timedelta
from pathlib import Path

from flask import Flask, current_app, request, session

from ..common.http import (
    current_employee_id,
    domain_error_response,
    internal_error_response,
    json_fail,
    json_ok,
    login_required,
    read_payload,
    read_uploaded_image,
)
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import DomainError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)

_EXTENSIONS = {"image/png": ".png", "image/jpeg": ".jpg", "image/jpg": ".jpg"}


def _store_upload(data: bytes, *, employee_id: int, mimetype: str) -> str:
    upload_dir = Path(current_app.config["UPLOAD_DIR"])
    upload_dir.mkdir(parents=True, exist_ok=True)
    filename = f"face-{employee_id}-{uuid.uuid4().hex}{_EXTENSIONS.get(mimetype, '.jpg')}"
    (upload_dir / filename).write_bytes(data)
    return filename


def _discard_upload(filename):
    if filename:
        (Path(current_app.config["UPLOAD_DIR"]) / Path(filename).name).unlink(missing_ok=True)


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        try:
            payload = read_payload()
            s_user = container.auth_service.authenticate(
                str(payload.get("email") or ""),
                str(payload.get("password") or ""),
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return internal_error_response("logging in")

        session.clear()
        session.permanent = bool(payload.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
        session["employee_id"] = s_user.employee_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value

        logger.info("Employee %s logged in", s_user.employee_id)
        return json_ok(
            {"employee_id": s_user.employee_id, "name": s_user.name, "role": s_user.role.value},
            "Logged in successfully",
        )

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return json_ok(None, "Logged out")

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return json_ok(
            {"employee_id": current_employee_id(), "name": session.get("name"), "role": session.get("role")}
        )

    @app.route("/employees/my", methods=["GET"], endpoint="employees_my")
    @login_required
    def my_profile():
        try:
            profile = container.employee_service.get_profile(current_employee_id())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return internal_error_response("loading profile")
        return json_ok(profile.to_dict())

    @app.route("/employees/my/face-enroll", methods=["POST"], endpoint="employees_face_enroll")
    @login_required
    def face_enroll():
        employee_id = current_employee_id()
        upload = request.files.get("image")
        if upload is None or not upload.filename:
            return json_fail(ValidationError.code, "An image file is required", 400)

        stored = None
        previous = None
        try:
            container.employee_service.require_active(employee_id)
            previous = container.face_engine.get_profile(employee_id)
            frame = read_uploaded_image({}, max_bytes=int(current_app.config["MAX_UPLOAD_BYTES"]))
            stored = _store_upload(frame, employee_id=employee_id, mimetype=(upload.mimetype or "").lower())
            profile = container.face_engine.enroll(employee_id, frame, image_path=stored)
        except DomainError as e:
            _discard_upload(stored)
            return domain_error_response(e)
        except Exception:
            _discard_upload(stored)
            return internal_error_response("enrolling face")

        if previous is not None and previous.image_path and previous.image_path != stored:
            try:
                _discard_upload(previous.image_path)
            except OSError:
                logger.warning("Could not remove replaced face image %s", previous.image_path)

        return json_ok(
            {
                "face_image_path": profile.image_path,
                "face_enrolled_at": profile.enrolled_at.isoformat(timespec="seconds"),
            },
            "Face enrolled successfully",
        )
