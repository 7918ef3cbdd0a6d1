from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceListRow, AttendanceRecord


class AttendanceRepository(Protocol):
    """The attendance ledger.

    Writers are conditional so that concurrent callers converge: the insert relies on
    UNIQUE(employee_id, work_date) and raises DuplicateKeyError when another request
    created the row first; the updates only touch a still-empty column and report
    whether they did.
    """

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert_sign_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        sign_in_time: datetime,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> int:
        raise NotImplementedError

    def set_sign_in_if_missing(
        self,
        *,
        attendance_id: int,
        sign_in_time: datetime,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> bool:
        raise NotImplementedError

    def set_sign_out_if_open(self, *, attendance_id: int, sign_out_time: datetime, auto: bool = False) -> bool:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[AttendanceRecord]:
        """Newest first."""

        raise NotImplementedError

    def list_range(self, *, start_date: date, end_date: date) -> Sequence[AttendanceListRow]:
        raise NotImplementedError

    def list_open_sessions(self, *, up_to: date) -> Sequence[AttendanceRecord]:
        """Records signed in but not signed out, with work_date <= up_to."""

        raise NotImplementedError
