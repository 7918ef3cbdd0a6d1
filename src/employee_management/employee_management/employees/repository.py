from __future__ import annotations

from typing import Optional, Protocol

from .model import Employee, EmployeeProfile


class EmployeeRepository(Protocol):
    """Repository interface for the employee directory.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_profile(self, employee_id: int) -> Optional[EmployeeProfile]:
        raise NotImplementedError
