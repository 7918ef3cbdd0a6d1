from __future__ import annotations

import json
import logging
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.constants import ALLOWED_IMAGE_MIMETYPES
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    FaceMismatch,
    NoFaceDetected,
    NotEnrolled,
    NotFoundError,
    NotSignedIn,
    OnLeave,
    UploadTooLarge,
    ValidationError,
)
from ..faces.encoder import decode_image_payload

logger = logging.getLogger(__name__)

ENROLL_URL = "/employees/my/face-enroll"

_STATUS_BY_ERROR = (
    (UploadTooLarge, 413),
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (NotEnrolled, 409),
    (OnLeave, 409),
    (NotSignedIn, 409),
    (FaceMismatch, 403),
    (NoFaceDetected, 422),
)


def json_ok(data: Any = None, message: str = "", status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status


def json_fail(error: str, message: str, status: int, **extra):
    body = {"success": False, "error": error, "message": message}
    body.update(extra)
    return jsonify(body), status


def status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def domain_error_response(error: DomainError):
    extra = {}
    if isinstance(error, NotEnrolled):
        extra["enroll_url"] = ENROLL_URL
    if isinstance(error, FaceMismatch):
        extra["distance"] = round(error.distance, 4)
    return json_fail(error.code, str(error), status_for(error), **extra)


def internal_error_response(context: str):
    logger.exception("Unexpected error while %s", context)
    return json_fail("internal_error", "Internal server error", 500)


def current_employee_id() -> int:
    return int(session["employee_id"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return json_fail(AuthenticationError.code, "Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return json_fail(AuthenticationError.code, "Please log in to continue", 401)
        if session.get("role") != Role.ADMIN.value:
            return json_fail(AuthorizationError.code, "Administrator access required", 403)
        return view(*args, **kwargs)

    return wrapper


def read_payload() -> dict:
    """JSON body when present, otherwise the form fields."""

    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data
    return request.form.to_dict()


def _check_size(data: bytes, max_bytes: int) -> bytes:
    if len(data) > max_bytes:
        raise UploadTooLarge(f"Image must be at most {max_bytes // (1024 * 1024)} MB")
    return data


def read_uploaded_image(payload: dict, *, max_bytes: int) -> Optional[bytes]:
    """Image from a multipart ``image`` file or a base64 ``image`` field; None if absent."""

    upload = request.files.get("image")
    if upload is not None and upload.filename:
        mimetype = (upload.mimetype or "").lower()
        if mimetype not in ALLOWED_IMAGE_MIMETYPES:
            raise ValidationError("Only JPEG and PNG images are allowed")
        data = upload.read()
        if not data:
            raise ValidationError("Image is empty")
        return _check_size(data, max_bytes)

    encoded = payload.get("image")
    if encoded:
        if not isinstance(encoded, str):
            raise ValidationError("image must be a base64 string")
        return _check_size(decode_image_payload(encoded), max_bytes)
    return None


def read_descriptor(payload: dict) -> Optional[list]:
    value = payload.get("descriptor")
    if value is None or value == "":
        return None
    if isinstance(value, str):
        # multipart forms carry the vector as a JSON array string
        try:
            value = json.loads(value)
        except ValueError:
            raise ValidationError("descriptor must be a list of numbers")
    if not isinstance(value, (list, tuple)):
        raise ValidationError("descriptor must be a list of numbers")
    return list(value)
