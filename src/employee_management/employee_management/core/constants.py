"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

FACE_DESCRIPTOR_LENGTH = 128
DEFAULT_FACE_MATCH_THRESHOLD = 0.45

DEFAULT_AUTO_SIGN_OUT_TIME = time(18, 0)
DEFAULT_AUTO_SIGN_OUT_INTERVAL_SECONDS = 60

DEFAULT_SESSION_DAYS = 7
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024
ALLOWED_IMAGE_MIMETYPES = frozenset({"image/jpeg", "image/jpg", "image/png"})
