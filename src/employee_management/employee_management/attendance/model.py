from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from ..core.enums import SessionState
from ..core.exceptions import AttendanceError


def _fmt(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="seconds") if value else None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one ledger row per (employee, calendar day)."""

    attendance_id: int
    employee_id: int
    work_date: date
    sign_in_time: Optional[datetime]
    sign_out_time: Optional[datetime]
    status: bool
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    auto_signed_out: bool = False

    def __post_init__(self):
        if self.sign_out_time is not None:
            if self.sign_in_time is None:
                raise ValueError("sign_out_time requires sign_in_time")
            if self.sign_out_time < self.sign_in_time:
                raise ValueError("sign_out_time must not be earlier than sign_in_time")

    @property
    def state(self) -> SessionState:
        if self.sign_in_time is None:
            return SessionState.NOT_STARTED
        if self.sign_out_time is None:
            return SessionState.SIGNED_IN
        return SessionState.SIGNED_OUT

    @property
    def worked_minutes(self) -> int:
        if not self.sign_in_time or not self.sign_out_time:
            return 0
        return int((self.sign_out_time - self.sign_in_time).total_seconds() // 60)

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employee_id": self.employee_id,
            "date": self.work_date.isoformat(),
            "sign_in_time": _fmt(self.sign_in_time),
            "sign_out_time": _fmt(self.sign_out_time),
            "status": self.status,
            "state": self.state.value,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "auto_signed_out": self.auto_signed_out,
            "worked_minutes": self.worked_minutes,
        }


@dataclass(frozen=True)
class AttendanceListRow:
    """Read-model for the admin listing (joined with employee/department/designation)."""

    record: AttendanceRecord
    employee_name: str
    employee_email: str
    department_name: Optional[str]
    designation_title: Optional[str]

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["employee"] = {
            "id": self.record.employee_id,
            "name": self.employee_name,
            "email": self.employee_email,
            "department": self.department_name,
            "designation": self.designation_title,
        }
        return data


@dataclass(frozen=True)
class Created:
    """Sign-in wrote today's sign-in time."""

    record: AttendanceRecord


@dataclass(frozen=True)
class AlreadySignedIn:
    """Sign-in was a no-op, today's record is returned unchanged."""

    record: AttendanceRecord


@dataclass(frozen=True)
class Rejected:
    """Sign-in refused; nothing was written to the ledger."""

    error: AttendanceError

    @property
    def reason(self) -> str:
        return self.error.code


SignInResult = Union[Created, AlreadySignedIn, Rejected]
