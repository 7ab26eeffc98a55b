import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "proctor_portal_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

CLIENT_URL = "http://localhost:5000"
RESET_TOKEN_TTL_MINUTES = 60

SESSION_COOKIE_SECURE = False

MAIL_DEFAULT_SENDER = "noreply@proctortracker.test"
MAIL_SUPPRESS_SEND = True
