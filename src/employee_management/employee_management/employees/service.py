from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import Employee, EmployeeProfile
from .repository import EmployeeRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    employee_id: int
    name: str
    role: Role


class AuthService:
    """Use case: authenticate an employee (login)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = (email or "").strip().lower()
        employee = self._employees.get_by_email(email) if email else None
        if not employee or not employee.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return SessionUser(employee_id=employee.employee_id, name=employee.name, role=employee.role)


class EmployeeService:
    """Use case: read the caller's directory entry."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def require_active(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        if not employee.is_active:
            raise ValidationError("Employee account is inactive")
        return employee

    def get_profile(self, employee_id: int) -> EmployeeProfile:
        profile = self._employees.get_profile(int(employee_id))
        if not profile:
            raise NotFoundError("Employee not found")
        return profile

