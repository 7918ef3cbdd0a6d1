from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: Plain data object (no DB access code). The face profile is stored on the
    same row but exposed separately through the FaceProfileRepository.
    """

    employee_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    department_id: int
    designation_id: int
    reporting_head_id: Optional[int] = None
    is_active: bool = True


@dataclass(frozen=True)
class EmployeeProfile:
    """Read-model for the caller's own profile screen."""

    employee_id: int
    name: str
    email: str
    role: Role
    department_name: Optional[str]
    designation_title: Optional[str]
    reporting_head_name: Optional[str]
    face_enrolled: bool
    face_image_path: Optional[str]

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "department": self.department_name,
            "designation": self.designation_title,
            "reporting_head": self.reporting_head_name,
            "face_enrolled": self.face_enrolled,
            "face_image_path": self.face_image_path,
        }
