from __future__ import annotations

import base64
import binascii
from typing import Optional, Protocol, Sequence

from ..core.exceptions import ValidationError


class FaceEncoder(Protocol):
    """Turns an encoded image (JPEG/PNG bytes) into one face descriptor.

    Returns None when no face is found. When several faces are present the
    implementation picks the single best one.
    """

    def encode(self, image_bytes: bytes) -> Optional[Sequence[float]]:
        raise NotImplementedError

    def distance(self, known: Sequence[float], live: Sequence[float]) -> float:
        """Distance between two descriptors produced by this encoder (lower is closer)."""

        raise NotImplementedError


def decode_image_payload(value: str) -> bytes:
    """Decode a base64 image, with or without a ``data:image/...;base64,`` prefix."""

    payload = (value or "").strip()
    if payload.startswith("data:"):
        _, _, payload = payload.partition(",")
    if not payload:
        raise ValidationError("Image is empty")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Image is not valid base64")
