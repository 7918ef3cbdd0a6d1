import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "employee_management_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False

FACE_MATCH_THRESHOLD = 0.45
FACE_SIGN_IN_REQUIRED = True
FACE_CLIENT_DESCRIPTORS = False

AUTO_SIGN_OUT_TIME = "18:00"
AUTO_SIGN_OUT_ENABLED = False
AUTO_SIGN_OUT_INTERVAL_SECONDS = 60

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads-test")
MAX_UPLOAD_BYTES = 5 * 1024 * 1024
