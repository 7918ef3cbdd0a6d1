from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

import numpy as np

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_FACE_MATCH_THRESHOLD, FACE_DESCRIPTOR_LENGTH
from ..core.exceptions import NoFaceDetected, NotEnrolled, NotFoundError, ValidationError
from .encoder import FaceEncoder
from .model import FaceProfile, MatchResult
from .repository import FaceProfileRepository

logger = logging.getLogger(__name__)


class FaceMatchEngine:
    """Enrolls a reference descriptor and verifies live captures against it.

    Single attempt, local and synchronous: one descriptor is computed from the frame
    and compared with the stored one using the encoder's distance. A capture is accepted
    iff ``distance <= threshold``.
    """

    def __init__(
        self,
        profiles: FaceProfileRepository,
        encoder: FaceEncoder,
        *,
        threshold: float = DEFAULT_FACE_MATCH_THRESHOLD,
        descriptor_length: int = FACE_DESCRIPTOR_LENGTH,
    ):
        if threshold <= 0:
            raise ValueError("threshold must be positive")
        self._profiles = profiles
        self._encoder = encoder
        self._threshold = float(threshold)
        self._descriptor_length = int(descriptor_length)

    @property
    def threshold(self) -> float:
        return self._threshold

    def _as_vector(self, descriptor: Sequence[float]) -> np.ndarray:
        try:
            vec = np.asarray(descriptor, dtype=np.float64).reshape(-1)
        except (TypeError, ValueError):
            raise ValidationError("Face descriptor must be a list of numbers")
        if vec.shape[0] != self._descriptor_length:
            raise ValidationError(f"Face descriptor must have {self._descriptor_length} values")
        if not np.all(np.isfinite(vec)):
            raise ValidationError("Face descriptor contains invalid values")
        return vec

    def _encode(self, frame: bytes) -> np.ndarray:
        if not frame:
            raise ValidationError("Image is empty")
        descriptor = self._encoder.encode(frame)
        if descriptor is None:
            raise NoFaceDetected()
        return self._as_vector(descriptor)

    def enroll(
        self,
        employee_id: int,
        frame: bytes,
        *,
        image_path: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> FaceProfile:
        vec = self._encode(frame)
        profile = FaceProfile.from_values(
            employee_id=employee_id,
            descriptor=vec.tolist(),
            enrolled_at=now or now_local(),
            image_path=image_path,
        )
        if not self._profiles.save_face_profile(profile):
            raise NotFoundError("Employee not found")

        logger.info("Face enrolled for employee %s", employee_id)
        return profile

    def get_profile(self, employee_id: int) -> Optional[FaceProfile]:
        return self._profiles.get_face_profile(employee_id)

    def is_enrolled(self, employee_id: int) -> bool:
        return self._profiles.get_face_profile(employee_id) is not None

    def verify(self, employee_id: int, frame: bytes) -> MatchResult:
        profile = self._require_profile(employee_id)
        return self._compare(profile, self._encode(frame))

    def verify_descriptor(self, employee_id: int, descriptor: Sequence[float]) -> MatchResult:
        """Same decision rule for a descriptor computed by the client."""

        profile = self._require_profile(employee_id)
        return self._compare(profile, self._as_vector(descriptor))

    def _require_profile(self, employee_id: int) -> FaceProfile:
        profile = self._profiles.get_face_profile(employee_id)
        if profile is None:
            raise NotEnrolled()
        return profile

    def _compare(self, profile: FaceProfile, live: np.ndarray) -> MatchResult:
        stored = self._as_vector(profile.descriptor)
        distance = float(self._encoder.distance(stored, live))
        result = MatchResult(accepted=distance <= self._threshold, distance=distance, threshold=self._threshold)
        logger.info(
            "Face verify employee=%s distance=%.4f threshold=%.2f accepted=%s",
            profile.employee_id,
            distance,
            self._threshold,
            result.accepted,
        )
        return result
