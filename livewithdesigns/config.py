# livewithdesigns/config.py
import os
from dotenv import load_dotenv

BASE_DIR = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(BASE_DIR, ".env"))

INSTANCE_DIR = os.path.join(BASE_DIR, "instance")


def _env(key: str, default=None):
    v = os.getenv(key)
    return v if v not in (None, "", "None") else default


def _env_bool(key: str, default: bool = False) -> bool:
    v = os.getenv(key)
    if v in (None, "", "None"):
        return default
    return str(v).strip().lower() in ("1", "true", "t", "yes", "y", "on")


def _env_list(key: str, default: list[str]) -> list[str]:
    v = _env(key)
    if not v:
        return default
    return [part.strip() for part in v.split(",") if part.strip()]


def _resolve_sqlite_uri(db_url: str | None) -> str:
    if not db_url:
        db_path = os.path.join(INSTANCE_DIR, "database.db")
        os.makedirs(os.path.dirname(db_path), exist_ok=True)
        return "sqlite:///" + db_path.replace("\\", "/")

    if db_url.startswith("sqlite:///"):
        raw_path = db_url.replace("sqlite:///", "", 1)
        if not os.path.isabs(raw_path):
            raw_path = os.path.join(BASE_DIR, raw_path)
        db_path = os.path.normpath(raw_path)
        os.makedirs(os.path.dirname(db_path), exist_ok=True)
        return "sqlite:///" + db_path.replace("\\", "/")

    # Heroku-style URLs still use the old scheme name
    if db_url.startswith("postgres://"):
        return db_url.replace("postgres://", "postgresql://", 1)

    return db_url


class Config:
    SECRET_KEY = _env("SECRET_KEY", "dev-please-change-me")

    SQLALCHEMY_DATABASE_URI = _resolve_sqlite_uri(_env("DATABASE_URL"))
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_AS_ASCII = False
    JSON_SORT_KEYS = False

    UPLOAD_FOLDER = _env("UPLOAD_FOLDER", os.path.join(BASE_DIR, "static", "uploads"))
    # Largest accepted request body: the video upload limit
    MAX_CONTENT_LENGTH = 100 * 1024 * 1024

    CORS_ORIGINS = _env_list(
        "CORS_ORIGINS",
        ["http://localhost:3000", "http://localhost:5173"],
    )

    # Bearer tokens
    AUTH_TOKEN_SALT = _env("AUTH_TOKEN_SALT", "lwd-auth-token")
    AUTH_TOKEN_MAX_AGE = int(_env("AUTH_TOKEN_MAX_AGE", 30 * 24 * 3600))
    PASSWORD_RESET_SALT = _env("PASSWORD_RESET_SALT", "lwd-password-reset")
    PASSWORD_RESET_MAX_AGE = 3600
    PASSWORD_RESET_URL = _env("PASSWORD_RESET_URL", "http://localhost:3000/reset-password")

    MAIL_SERVER = _env("MAIL_SERVER", "smtp.gmail.com")
    MAIL_PORT = int(_env("MAIL_PORT", 465))
    MAIL_USE_SSL = _env_bool("MAIL_USE_SSL", True)
    MAIL_USE_TLS = _env_bool("MAIL_USE_TLS", False)
    MAIL_USERNAME = _env("MAIL_USERNAME")
    MAIL_PASSWORD = _env("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = _env("MAIL_DEFAULT_SENDER", _env("MAIL_USERNAME"))
    MAIL_SUPPRESS_SEND = _env_bool("MAIL_SUPPRESS_SEND", False)
    MAIL_DEBUG = _env_bool("MAIL_DEBUG", False)

    ORDER_NOTIFY_EMAIL = _env("ORDER_NOTIFY_EMAIL")

    # Payment gateway (Razorpay-compatible REST API)
    PAYMENT_KEY_ID = _env("PAYMENT_KEY_ID")
    PAYMENT_KEY_SECRET = _env("PAYMENT_KEY_SECRET")
    PAYMENT_API_URL = _env("PAYMENT_API_URL", "https://api.razorpay.com/v1")
    PAYMENT_CURRENCY = _env("PAYMENT_CURRENCY", "INR")
