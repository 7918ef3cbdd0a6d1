from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.exceptions import AttendanceError, FaceMismatch, NotEnrolled, ValidationError
from ..faces.model import MatchResult
from ..faces.service import FaceMatchEngine
from .model import Rejected, SignInResult
from .service import AttendanceService

logger = logging.getLogger(__name__)


class FaceSignInFlow:
    """Leave gate -> face verification -> ledger write.

    The leave gate runs first so an employee on leave is refused whatever the face
    outcome. Any recoverable failure comes back as ``Rejected`` and leaves the ledger
    untouched.
    """

    def __init__(
        self,
        attendance: AttendanceService,
        faces: FaceMatchEngine,
        *,
        face_required: bool = True,
        allow_client_descriptors: bool = False,
    ):
        self._attendance = attendance
        self._faces = faces
        self._face_required = bool(face_required)
        self._allow_client_descriptors = bool(allow_client_descriptors)

    @property
    def face_required(self) -> bool:
        return self._face_required

    def _verify(
        self,
        employee_id: int,
        *,
        frame: Optional[bytes],
        descriptor: Optional[Sequence[float]],
    ) -> MatchResult:
        if not self._faces.is_enrolled(employee_id):
            raise NotEnrolled()
        if frame:
            return self._faces.verify(employee_id, frame)
        if descriptor is not None:
            if not self._allow_client_descriptors:
                raise ValidationError("Client-side face descriptors are not accepted, send an image")
            return self._faces.verify_descriptor(employee_id, descriptor)
        raise ValidationError("A face image is required to sign in")

    def sign_in(
        self,
        employee_id: int,
        *,
        now: Optional[datetime] = None,
        frame: Optional[bytes] = None,
        descriptor: Optional[Sequence[float]] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> SignInResult:
        now = now or now_local()
        try:
            self._attendance.ensure_can_sign_in(employee_id, now.date())
            if self._face_required:
                match = self._verify(employee_id, frame=frame, descriptor=descriptor)
                if not match.accepted:
                    raise FaceMismatch(match.distance)
            return self._attendance.sign_in(employee_id, now, latitude=latitude, longitude=longitude)
        except AttendanceError as e:
            logger.info("Sign-in rejected for employee %s: %s", employee_id, e.code)
            return Rejected(e)
