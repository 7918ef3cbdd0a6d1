from __future__ import annotations

from flask import Flask, current_app, request

from ..common.http import (
    admin_required,
    current_employee_id,
    domain_error_response,
    internal_error_response,
    json_ok,
    login_required,
    read_descriptor,
    read_payload,
    read_uploaded_image,
)
from ..common.validators import optional_coordinate, require_month, require_year
from ..core.exceptions import DomainError
from ..container import Container
from .model import Created, Rejected


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance/sign-in", methods=["POST"], endpoint="attendance_sign_in")
    @login_required
    def sign_in():
        try:
            payload = read_payload()
            frame = read_uploaded_image(payload, max_bytes=int(current_app.config["MAX_UPLOAD_BYTES"]))
            result = container.sign_in_flow.sign_in(
                current_employee_id(),
                frame=frame,
                descriptor=read_descriptor(payload),
                latitude=optional_coordinate(payload.get("latitude"), "latitude", limit=90),
                longitude=optional_coordinate(payload.get("longitude"), "longitude", limit=180),
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return internal_error_response("signing in")

        if isinstance(result, Rejected):
            return domain_error_response(result.error)
        if isinstance(result, Created):
            return json_ok(result.record.to_dict(), "Signed in successfully", 201)
        # AlreadySignedIn
        return json_ok(result.record.to_dict(), "Already signed in today")

    @app.route("/attendance/sign-out", methods=["POST"], endpoint="attendance_sign_out")
    @login_required
    def sign_out():
        try:
            record = container.attendance_service.sign_out(current_employee_id())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return internal_error_response("signing out")
        return json_ok(record.to_dict(), "Signed out successfully")

    @app.route("/attendance/my/today", methods=["GET"], endpoint="attendance_my_today")
    @login_required
    def my_today():
        try:
            record = container.attendance_service.get_today(current_employee_id())
        except Exception:
            return internal_error_response("loading today's attendance")
        return json_ok(record.to_dict() if record else None)

    @app.route("/attendance/my", methods=["GET"], endpoint="attendance_my")
    @login_required
    def my_history():
        try:
            records = container.attendance_service.list_for_employee(current_employee_id())
        except Exception:
            return internal_error_response("loading attendance history")
        return json_ok([r.to_dict() for r in records])

    @app.route("/attendance", methods=["GET"], endpoint="attendance_list")
    @admin_required
    def list_all():
        month = request.args.get("month") or None
        year = request.args.get("year") or None
        try:
            rows = container.attendance_service.list_all(
                month=require_month(month) if month is not None else None,
                year=require_year(year) if year is not None else None,
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return internal_error_response("listing attendance")
        return json_ok([row.to_dict() for row in rows])
