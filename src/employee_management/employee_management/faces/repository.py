from __future__ import annotations

from typing import Optional, Protocol

from .model import FaceProfile


class FaceProfileRepository(Protocol):
    """Fetch/replace the face reference of an employee."""

    def get_face_profile(self, employee_id: int) -> Optional[FaceProfile]:
        raise NotImplementedError

    def save_face_profile(self, profile: FaceProfile) -> bool:
        """Replace any prior enrollment. Returns False if the employee does not exist."""

        raise NotImplementedError
