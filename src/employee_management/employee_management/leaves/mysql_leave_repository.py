from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import LeaveRequest
from .repository import LeaveRepository


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_covering(
        self,
        *,
        employee_id: int,
        day: date,
        status: LeaveStatus = LeaveStatus.APPROVED,
    ) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT leave_request_id, employee_id, leave_type_id, start_date, end_date,
                       is_half_day, leave_status, approved_by
                FROM leave_requests
                WHERE employee_id=%s AND leave_status=%s AND start_date <= %s AND end_date >= %s
                ORDER BY start_date
                """,
                (int(employee_id), status.value, day, day),
            )
            return [
                LeaveRequest(
                    leave_request_id=int(r["leave_request_id"]),
                    employee_id=int(r["employee_id"]),
                    leave_type_id=int(r["leave_type_id"]),
                    start_date=r["start_date"],
                    end_date=r["end_date"],
                    leave_status=LeaveStatus(r["leave_status"]),
                    is_half_day=bool(r.get("is_half_day")),
                    approved_by=r.get("approved_by"),
                )
                for r in fetchall(cur)
            ]
