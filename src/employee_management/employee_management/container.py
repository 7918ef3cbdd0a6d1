from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.scheduler import AutoSignOutSweeper
from .attendance.service import AttendanceService
from .attendance.sign_in import FaceSignInFlow
from .core.constants import (
    DEFAULT_AUTO_SIGN_OUT_INTERVAL_SECONDS,
    DEFAULT_AUTO_SIGN_OUT_TIME,
    DEFAULT_FACE_MATCH_THRESHOLD,
)
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import AuthService, EmployeeService
from .faces.encoder import FaceEncoder
from .faces.repository import FaceProfileRepository
from .faces.service import FaceMatchEngine
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveCalendar


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    faces_repo: FaceProfileRepository
    leaves_repo: LeaveRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    employee_service: EmployeeService
    leave_calendar: LeaveCalendar
    attendance_service: AttendanceService
    face_engine: FaceMatchEngine
    sign_in_flow: FaceSignInFlow
    sweeper: AutoSignOutSweeper


def assemble(
    *,
    employees_repo: EmployeeRepository,
    faces_repo: FaceProfileRepository,
    leaves_repo: LeaveRepository,
    attendance_repo: AttendanceRepository,
    encoder: FaceEncoder,
    conn: Optional[DatabaseConnection] = None,
    face_match_threshold: float = DEFAULT_FACE_MATCH_THRESHOLD,
    face_sign_in_required: bool = True,
    face_client_descriptors: bool = False,
    auto_sign_out_time: time = DEFAULT_AUTO_SIGN_OUT_TIME,
    auto_sign_out_interval_seconds: float = DEFAULT_AUTO_SIGN_OUT_INTERVAL_SECONDS,
) -> Container:
    """Wire services onto the given repositories (MySQL in the app, in-memory in tests)."""

    leave_calendar = LeaveCalendar(leaves_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        leave_calendar,
        auto_sign_out_time=auto_sign_out_time,
    )
    face_engine = FaceMatchEngine(faces_repo, encoder, threshold=face_match_threshold)
    sign_in_flow = FaceSignInFlow(
        attendance_service,
        face_engine,
        face_required=face_sign_in_required,
        allow_client_descriptors=face_client_descriptors,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        faces_repo=faces_repo,
        leaves_repo=leaves_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(employees_repo),
        employee_service=EmployeeService(employees_repo),
        leave_calendar=leave_calendar,
        attendance_service=attendance_service,
        face_engine=face_engine,
        sign_in_flow=sign_in_flow,
        sweeper=AutoSignOutSweeper(attendance_service, interval_seconds=auto_sign_out_interval_seconds),
    )


def build_container(
    *,
    db_config: dict,
    encoder: Optional[FaceEncoder] = None,
    face_match_threshold: float = DEFAULT_FACE_MATCH_THRESHOLD,
    face_sign_in_required: bool = True,
    face_client_descriptors: bool = False,
    auto_sign_out_time: time = DEFAULT_AUTO_SIGN_OUT_TIME,
    auto_sign_out_interval_seconds: float = DEFAULT_AUTO_SIGN_OUT_INTERVAL_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    if encoder is None:
        # dlib/OpenCV are only loaded when the real app is wired.
        from .faces.dlib_encoder import DlibFaceEncoder

        encoder = DlibFaceEncoder()

    employees_repo = MySQLEmployeeRepository(conn)
    return assemble(
        employees_repo=employees_repo,
        faces_repo=employees_repo,
        leaves_repo=MySQLLeaveRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        encoder=encoder,
        conn=conn,
        face_match_threshold=face_match_threshold,
        face_sign_in_required=face_sign_in_required,
        face_client_descriptors=face_client_descriptors,
        auto_sign_out_time=auto_sign_out_time,
        auto_sign_out_interval_seconds=auto_sign_out_interval_seconds,
    )
