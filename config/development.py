import os

from config import env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "employee_management"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
# Optional: also seed demo data on startup
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

# Face-gated sign-in
FACE_MATCH_THRESHOLD = float(os.getenv("FACE_MATCH_THRESHOLD", "0.45"))
FACE_SIGN_IN_REQUIRED = env_flag("FACE_SIGN_IN_REQUIRED", "1")
# Accept descriptors computed in the browser instead of an uploaded frame
FACE_CLIENT_DESCRIPTORS = env_flag("FACE_CLIENT_DESCRIPTORS", "0")

# Auto sign-out sweep
AUTO_SIGN_OUT_TIME = os.getenv("AUTO_SIGN_OUT_TIME", "18:00")
AUTO_SIGN_OUT_ENABLED = env_flag("AUTO_SIGN_OUT_ENABLED", "1")
AUTO_SIGN_OUT_INTERVAL_SECONDS = int(os.getenv("AUTO_SIGN_OUT_INTERVAL_SECONDS", "60"))

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
