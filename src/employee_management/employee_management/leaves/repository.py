from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def list_covering(
        self,
        *,
        employee_id: int,
        day: date,
        status: LeaveStatus = LeaveStatus.APPROVED,
    ) -> Sequence[LeaveRequest]:
        """Requests of an employee whose [start_date, end_date] contains ``day``."""

        raise NotImplementedError
