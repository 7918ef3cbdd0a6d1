from __future__ import annotations

from datetime import date

from ..core.enums import LeaveStatus
from .repository import LeaveRepository


class LeaveCalendar:
    """Answers "is employee X on approved leave on day D".

    A half-day approved leave does not count: the employee still works (and signs in)
    for the other half of the day.
    """

    def __init__(self, leaves: LeaveRepository):
        self._leaves = leaves

    def is_on_leave(self, employee_id: int, day: date) -> bool:
        requests = self._leaves.list_covering(employee_id=int(employee_id), day=day, status=LeaveStatus.APPROVED)
        return any(r.covers(day) and not r.is_half_day for r in requests)
