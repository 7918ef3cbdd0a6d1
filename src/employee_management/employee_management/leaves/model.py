from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import LeaveStatus


@dataclass(frozen=True)
class LeaveRequest:
    leave_request_id: int
    employee_id: int
    leave_type_id: int
    start_date: date
    end_date: date
    leave_status: LeaveStatus
    is_half_day: bool = False
    approved_by: Optional[int] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date
