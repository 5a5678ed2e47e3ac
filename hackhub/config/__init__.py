import os
from datetime import datetime, timezone

from dotenv import load_dotenv

load_dotenv()


def _parse_deadline(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class Config:
    # Provide a safe development fallback to avoid 500s when SECRET_KEY is missing.
    SECRET_KEY = os.getenv('SECRET_KEY') or 'dev-secret-key-change-me'
    ENV = os.getenv('HACKHUB_ENV', 'development')
    DATABASE_URL = os.getenv('DATABASE_URL')
    SQLALCHEMY_DATABASE_URI = DATABASE_URL or 'sqlite:///hackhub.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    REMEMBER_COOKIE_HTTPONLY = True
    WTF_CSRF_TIME_LIMIT = None

    # Create tables on startup when no migrations have been applied (dev convenience)
    AUTO_CREATE_TABLES = os.getenv('HACKHUB_SKIP_BOOTSTRAP', '0') != '1'

    # Login throttling
    MAX_LOGIN_ATTEMPTS = 5
    LOCKOUT_MINUTES = 15
    LOGIN_RATE_LIMIT = os.getenv('LOGIN_RATE_LIMIT', '20 per minute')
    RATELIMIT_ENABLED = os.getenv('RATELIMIT_ENABLED', 'true').lower() in ('1', 'true', 'yes')
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')

    # Event settings. Default deadline is May 30, 2025, 9 PM IST.
    SUBMISSION_DEADLINE = _parse_deadline(os.getenv('SUBMISSION_DEADLINE', '2025-05-30T15:30:00Z'))
    OPEN_PROBLEM_FORM_URL = os.getenv('OPEN_PROBLEM_FORM_URL', 'https://tally.so/r/mBlbMQ')

    # Screenshot uploads
    UPLOAD_SUBDIR = os.getenv('UPLOAD_SUBDIR', 'screenshots')
    MAX_UPLOAD_SIZE = 5 * 1024 * 1024
