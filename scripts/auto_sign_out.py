"""Run one auto sign-out sweep, e.g. from cron every few minutes.

    */5 * * * * cd /srv/employee-management && python scripts/auto_sign_out.py
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.employee_management.employee_management.attendance.mysql_attendance_repository import (
    MySQLAttendanceRepository,
)
from src.employee_management.employee_management.attendance.service import AttendanceService
from src.employee_management.employee_management.common.datetime_utils import parse_clock_time
from src.employee_management.employee_management.database.connection import DBConfig, DatabaseConnection
from src.employee_management.employee_management.employees.mysql_employee_repository import (
    MySQLEmployeeRepository,
)
from src.employee_management.employee_management.leaves.mysql_leave_repository import MySQLLeaveRepository
from src.employee_management.employee_management.leaves.service import LeaveCalendar


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper())

    # The sweep needs no face encoder, so the services are wired by hand.
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings.DB_CONFIG))
    service = AttendanceService(
        MySQLAttendanceRepository(conn),
        MySQLEmployeeRepository(conn),
        LeaveCalendar(MySQLLeaveRepository(conn)),
        auto_sign_out_time=parse_clock_time(settings.AUTO_SIGN_OUT_TIME),
    )
    closed = service.auto_sign_out()
    print(f"OK: auto sign-out closed {len(closed)} session(s)")


if __name__ == "__main__":
    main()
