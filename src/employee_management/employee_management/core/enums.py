from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role used for authorization."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class SessionState(str, Enum):
    """Daily attendance state of one employee.

    NOT_STARTED -> SIGNED_IN -> SIGNED_OUT, and SIGNED_OUT is terminal for the day.
    """

    NOT_STARTED = "NOT_STARTED"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


class LeaveStatus(str, Enum):
    """Approval state of a leave request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
