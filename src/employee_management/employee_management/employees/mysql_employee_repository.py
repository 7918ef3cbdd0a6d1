from __future__ import annotations

import json
from typing import Any, Dict, Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from ..faces.model import FaceProfile
from ..faces.repository import FaceProfileRepository
from .model import Employee, EmployeeProfile
from .repository import EmployeeRepository

_EMPLOYEE_COLUMNS = """
    employee_id, name, email, password_hash, role,
    department_id, designation_id, reporting_head_id, is_active
"""


def _to_employee(row: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        department_id=int(row["department_id"]),
        designation_id=int(row["designation_id"]),
        reporting_head_id=row.get("reporting_head_id"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository, FaceProfileRepository):
    """Employee directory backed by the ``employees`` table.

    The face descriptor lives on the employee row as JSON text.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_profile(self, employee_id: int) -> Optional[EmployeeProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    e.employee_id, e.name, e.email, e.role,
                    d.name AS department_name,
                    g.title AS designation_title,
                    h.name AS reporting_head_name,
                    e.face_descriptor IS NOT NULL AS face_enrolled,
                    e.face_image_path
                FROM employees e
                LEFT JOIN departments d ON d.department_id = e.department_id
                LEFT JOIN designations g ON g.designation_id = e.designation_id
                LEFT JOIN employees h ON h.employee_id = e.reporting_head_id
                WHERE e.employee_id=%s
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return EmployeeProfile(
                employee_id=int(r["employee_id"]),
                name=r["name"],
                email=r["email"],
                role=Role(r["role"]),
                department_name=r.get("department_name"),
                designation_title=r.get("designation_title"),
                reporting_head_name=r.get("reporting_head_name"),
                face_enrolled=bool(r.get("face_enrolled")),
                face_image_path=r.get("face_image_path"),
            )

    def get_face_profile(self, employee_id: int) -> Optional[FaceProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, face_descriptor, face_image_path, face_enrolled_at
                FROM employees
                WHERE employee_id=%s AND face_descriptor IS NOT NULL
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return FaceProfile.from_values(
                employee_id=int(r["employee_id"]),
                descriptor=json.loads(r["face_descriptor"]),
                enrolled_at=r["face_enrolled_at"],
                image_path=r.get("face_image_path"),
            )

    def save_face_profile(self, profile: FaceProfile) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET face_descriptor=%s, face_image_path=COALESCE(%s, face_image_path), face_enrolled_at=%s
                WHERE employee_id=%s
                """,
                (
                    json.dumps(list(profile.descriptor)),
                    profile.image_path,
                    profile.enrolled_at,
                    int(profile.employee_id),
                ),
            )
            # rowcount is 0 when values are unchanged, so confirm the row exists instead.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM employees WHERE employee_id=%s", (int(profile.employee_id),))
            return fetchone(cur) is not None
