from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import end_of_day, month_range, now_local, year_range
from ..core.constants import DEFAULT_AUTO_SIGN_OUT_TIME
from ..core.exceptions import DuplicateKeyError, NotFoundError, NotSignedIn, OnLeave, ValidationError
from ..employees.repository import EmployeeRepository
from ..leaves.service import LeaveCalendar
from .model import AlreadySignedIn, AttendanceListRow, AttendanceRecord, Created, SignInResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _to_seconds(value: datetime) -> datetime:
    # The ledger stores DATETIME(0); sub-second parts would be rounded by MySQL.
    return value.replace(microsecond=0)


class AttendanceService:
    """Daily attendance state machine per (employee, date).

    NOT_STARTED -> SIGNED_IN -> SIGNED_OUT. Sign-in and sign-out are idempotent, and
    every write goes through the repository's conditional writers so that concurrent
    requests for the same key converge on the first writer's value.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        leaves: LeaveCalendar,
        *,
        auto_sign_out_time: time = DEFAULT_AUTO_SIGN_OUT_TIME,
    ):
        self._attendance = attendance
        self._employees = employees
        self._leaves = leaves
        self._auto_sign_out_time = auto_sign_out_time

    @property
    def auto_sign_out_time(self) -> time:
        return self._auto_sign_out_time

    def ensure_can_sign_in(self, employee_id: int, day: date) -> None:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        if not employee.is_active:
            raise ValidationError("Employee account is inactive")
        if self._leaves.is_on_leave(employee.employee_id, day):
            raise OnLeave()

    def _reload(self, employee_id: int, day: date) -> AttendanceRecord:
        record = self._attendance.get_for_employee_and_date(employee_id, day)
        if record is None:
            raise NotFoundError("Attendance record not found")
        return record

    def sign_in(
        self,
        employee_id: int,
        now: Optional[datetime] = None,
        *,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> SignInResult:
        now = _to_seconds(now or now_local())
        today = now.date()
        employee_id = int(employee_id)

        self.ensure_can_sign_in(employee_id, today)

        existing = self._attendance.get_for_employee_and_date(employee_id, today)
        if existing and existing.sign_in_time is not None:
            return AlreadySignedIn(existing)

        if existing is None:
            try:
                self._attendance.insert_sign_in(
                    employee_id=employee_id,
                    work_date=today,
                    sign_in_time=now,
                    latitude=latitude,
                    longitude=longitude,
                )
            except DuplicateKeyError:
                logger.debug("Concurrent sign-in for employee %s on %s, re-fetching", employee_id, today)
                existing = self._reload(employee_id, today)
                if existing.sign_in_time is not None:
                    return AlreadySignedIn(existing)
            else:
                record = self._reload(employee_id, today)
                logger.info("Employee %s signed in at %s", employee_id, now)
                return Created(record)

        # A row without sign_in_time is not produced by this service, but is filled in
        # when met (e.g. created by an administrator).
        won = self._attendance.set_sign_in_if_missing(
            attendance_id=existing.attendance_id,
            sign_in_time=now,
            latitude=latitude,
            longitude=longitude,
        )
        record = self._reload(employee_id, today)
        if won:
            logger.info("Employee %s signed in at %s", employee_id, now)
            return Created(record)
        return AlreadySignedIn(record)

    def sign_out(self, employee_id: int, now: Optional[datetime] = None) -> AttendanceRecord:
        now = _to_seconds(now or now_local())
        today = now.date()
        employee_id = int(employee_id)

        record = self._attendance.get_for_employee_and_date(employee_id, today)
        if record is None or record.sign_in_time is None:
            raise NotSignedIn()
        if record.sign_out_time is not None:
            return record
        if now < record.sign_in_time:
            raise ValidationError("Sign-out time cannot be earlier than sign-in time")

        if self._attendance.set_sign_out_if_open(attendance_id=record.attendance_id, sign_out_time=now):
            logger.info("Employee %s signed out at %s", employee_id, now)
        return self._reload(employee_id, today)

    def _auto_sign_out_at(self, record: AttendanceRecord, now: datetime) -> Optional[datetime]:
        cutoff = datetime.combine(record.work_date, self._auto_sign_out_time)
        if record.sign_in_time < cutoff:
            return cutoff if now >= cutoff else None
        # Signed in after the cutoff: closed once the calendar day is over.
        if now.date() > record.work_date:
            return end_of_day(record.work_date)
        return None

    def auto_sign_out(self, now: Optional[datetime] = None) -> list[AttendanceRecord]:
        """Sign out every open session whose cutoff has passed.

        Safe to run repeatedly and from several processes at once.
        """

        now = _to_seconds(now or now_local())
        closed: list[AttendanceRecord] = []

        for record in self._attendance.list_open_sessions(up_to=now.date()):
            when = self._auto_sign_out_at(record, now)
            if when is None:
                continue
            if self._attendance.set_sign_out_if_open(attendance_id=record.attendance_id, sign_out_time=when, auto=True):
                closed.append(self._reload(record.employee_id, record.work_date))

        if closed:
            logger.info("Auto sign-out closed %d session(s)", len(closed))
        return closed

    def get_today(self, employee_id: int, today: Optional[date] = None) -> Optional[AttendanceRecord]:
        today = today or now_local().date()
        return self._attendance.get_for_employee_and_date(int(employee_id), today)

    def list_for_employee(self, employee_id: int) -> list[AttendanceRecord]:
        return list(self._attendance.list_for_employee(int(employee_id)))

    def list_all(
        self,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
        today: Optional[date] = None,
    ) -> list[AttendanceListRow]:
        """All employees' records for a month (default: current month) or a whole year."""

        today = today or now_local().date()
        if month is None and year is None:
            start, end = month_range(today.year, today.month)
        elif month is None:
            start, end = year_range(int(year))
        else:
            start, end = month_range(int(year or today.year), int(month))
        return list(self._attendance.list_range(start_date=start, end_date=end))
