# livewithdesigns/models/base.py
import re
from datetime import datetime, timezone

from livewithdesigns.extensions import db
from livewithdesigns.errors import ValidationError


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def iso(value):
    return value.isoformat() if value else None


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)


def required_text(value, message: str, max_len: int | None = None, max_message: str | None = None) -> str:
    s = str(value).strip() if value is not None else ""
    if not s:
        raise ValidationError(message)
    if max_len is not None and len(s) > max_len:
        raise ValidationError(max_message or f"Value cannot exceed {max_len} characters")
    return s


def optional_text(value, max_len: int | None = None, max_message: str | None = None):
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    if max_len is not None and len(s) > max_len:
        raise ValidationError(max_message or f"Value cannot exceed {max_len} characters")
    return s


def choice(value, choices, field: str, default=None):
    if value in (None, ""):
        if default is None:
            return None
        return default
    if value not in choices:
        raise ValidationError(f"`{value}` is not a valid value for {field}")
    return value


EMAIL_RE = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")
