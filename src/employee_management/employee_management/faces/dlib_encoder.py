from __future__ import annotations

import logging
from typing import Optional

import cv2
import face_recognition
import numpy as np

from ..core.exceptions import ValidationError
from .encoder import FaceEncoder

logger = logging.getLogger(__name__)


class DlibFaceEncoder(FaceEncoder):
    """face_recognition (dlib) backed encoder producing 128-d descriptors."""

    def __init__(self, *, model: str = "hog", num_jitters: int = 1):
        self._model = model
        self._num_jitters = int(num_jitters)

    @staticmethod
    def _to_rgb(image_bytes: bytes) -> np.ndarray:
        nparr = np.frombuffer(image_bytes, np.uint8)
        img = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
        if img is None:
            raise ValidationError("Image could not be decoded")

        # RGBA -> BGR, grayscale -> BGR
        if len(img.shape) == 3 and img.shape[2] == 4:
            img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
        elif len(img.shape) == 2:
            img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)

        # dlib needs a contiguous uint8 RGB array
        rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
        return np.ascontiguousarray(rgb, dtype=np.uint8)

    def encode(self, image_bytes: bytes) -> Optional[np.ndarray]:
        rgb = self._to_rgb(image_bytes)
        boxes = face_recognition.face_locations(rgb, model=self._model)
        if not boxes:
            return None

        if len(boxes) > 1:
            logger.debug("Detected %d faces, keeping the largest", len(boxes))
        # (top, right, bottom, left); the largest box is the closest/clearest face
        best = max(boxes, key=lambda b: (b[2] - b[0]) * (b[1] - b[3]))
        encodings = face_recognition.face_encodings(rgb, [best], num_jitters=self._num_jitters)
        return encodings[0] if encodings else None

    def distance(self, known, live) -> float:
        return float(face_recognition.face_distance([np.asarray(known)], np.asarray(live))[0])
