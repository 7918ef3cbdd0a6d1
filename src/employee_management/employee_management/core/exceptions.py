from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class UploadTooLarge(ValidationError):
    """Raised when an uploaded image exceeds the configured size limit."""

    code = "upload_too_large"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = "authentication_error"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "authorization_error"


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    code = "not_found"


class DuplicateKeyError(DomainError):
    """Raised by repositories when a unique constraint rejects an insert."""

    code = "duplicate_key"


class AttendanceError(DomainError):
    """Recoverable attendance/face failure reported to the caller."""

    code = "attendance_error"
    default_message = "Attendance request rejected"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class NoFaceDetected(AttendanceError):
    code = "no_face_detected"
    default_message = "No face detected in the captured image, please try again"


class NotEnrolled(AttendanceError):
    code = "not_enrolled"
    default_message = "No face enrolled for this employee, please enroll first"


class FaceMismatch(AttendanceError):
    code = "face_mismatch"
    default_message = "Face does not match the enrolled profile"

    def __init__(self, distance: float, message: Optional[str] = None):
        super().__init__(message)
        self.distance = float(distance)


class OnLeave(AttendanceError):
    code = "on_leave"
    default_message = "You are on approved leave today"


class NotSignedIn(AttendanceError):
    code = "not_signed_in"
    default_message = "You have not signed in today, please sign in first"
