from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_float, translate_duplicate_key
from .model import AttendanceListRow, AttendanceRecord
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    ar.attendance_id, ar.employee_id, ar.work_date, ar.sign_in_time, ar.sign_out_time,
    ar.status, ar.latitude, ar.longitude, ar.auto_signed_out
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        sign_in_time=r.get("sign_in_time"),
        sign_out_time=r.get("sign_out_time"),
        status=bool(r.get("status")),
        latitude=optional_float(r.get("latitude")),
        longitude=optional_float(r.get("longitude")),
        auto_signed_out=bool(r.get("auto_signed_out")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.employee_id=%s AND ar.work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def insert_sign_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        sign_in_time: datetime,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            with translate_duplicate_key("Attendance already exists for this employee and date"):
                cur.execute(
                    """
                    INSERT INTO attendance_records(employee_id, work_date, sign_in_time, status, latitude, longitude)
                    VALUES(%s,%s,%s,1,%s,%s)
                    """,
                    (int(employee_id), work_date, sign_in_time, latitude, longitude),
                )
            return int(cur.lastrowid)

    def set_sign_in_if_missing(
        self,
        *,
        attendance_id: int,
        sign_in_time: datetime,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET sign_in_time=%s, status=1,
                    latitude=COALESCE(%s, latitude), longitude=COALESCE(%s, longitude)
                WHERE attendance_id=%s AND sign_in_time IS NULL
                """,
                (sign_in_time, latitude, longitude, int(attendance_id)),
            )
            return cur.rowcount > 0

    def set_sign_out_if_open(self, *, attendance_id: int, sign_out_time: datetime, auto: bool = False) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET sign_out_time=%s, auto_signed_out=%s
                WHERE attendance_id=%s
                  AND sign_in_time IS NOT NULL
                  AND sign_out_time IS NULL
                  AND sign_in_time <= %s
                """,
                (sign_out_time, 1 if auto else 0, int(attendance_id), sign_out_time),
            )
            return cur.rowcount > 0

    def list_for_employee(self, employee_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.employee_id=%s
                ORDER BY ar.work_date DESC, ar.attendance_id DESC
                """,
                (int(employee_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_range(self, *, start_date: date, end_date: date) -> Sequence[AttendanceListRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    {_RECORD_COLUMNS},
                    e.name AS employee_name, e.email AS employee_email,
                    d.name AS department_name,
                    g.title AS designation_title
                FROM attendance_records ar
                JOIN employees e ON e.employee_id = ar.employee_id
                LEFT JOIN departments d ON d.department_id = e.department_id
                LEFT JOIN designations g ON g.designation_id = e.designation_id
                WHERE ar.work_date BETWEEN %s AND %s
                ORDER BY ar.work_date DESC, e.name ASC
                """,
                (start_date, end_date),
            )
            return [
                AttendanceListRow(
                    record=_to_record(r),
                    employee_name=r["employee_name"],
                    employee_email=r["employee_email"],
                    department_name=r.get("department_name"),
                    designation_title=r.get("designation_title"),
                )
                for r in fetchall(cur)
            ]

    def list_open_sessions(self, *, up_to: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.sign_in_time IS NOT NULL
                  AND ar.sign_out_time IS NULL
                  AND ar.work_date <= %s
                ORDER BY ar.work_date ASC, ar.attendance_id ASC
                """,
                (up_to,),
            )
            return [_to_record(r) for r in fetchall(cur)]
