from __future__ import annotations

from flask import current_app
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired


def _get_serializer(salt_key: str, default_salt: str) -> URLSafeTimedSerializer:
    secret = current_app.config.get("SECRET_KEY")
    if not secret:
        raise RuntimeError("SECRET_KEY is not set; tokens cannot be signed without it.")
    salt = current_app.config.get(salt_key, default_salt)
    return URLSafeTimedSerializer(secret_key=secret, salt=salt)


def _load_uid(s: URLSafeTimedSerializer, token: str, max_age: int):
    data = s.loads(token, max_age=max_age)
    uid = data.get("uid") if isinstance(data, dict) else None
    return int(uid)


# --- Bearer tokens -----------------------------------------------------------

def issue_auth_token(user_id: int) -> str:
    s = _get_serializer("AUTH_TOKEN_SALT", "lwd-auth-token")
    return s.dumps({"uid": user_id})


def load_auth_token(token: str) -> int | None:
    """User id carried by a bearer token, or None when it is invalid or expired."""
    s = _get_serializer("AUTH_TOKEN_SALT", "lwd-auth-token")
    max_age = int(current_app.config.get("AUTH_TOKEN_MAX_AGE", 30 * 24 * 3600))
    try:
        return _load_uid(s, token, max_age)
    except (BadSignature, TypeError, ValueError):
        return None


# --- Password reset ----------------------------------------------------------

def gen_reset_token(user_id: int) -> str:
    s = _get_serializer("PASSWORD_RESET_SALT", "lwd-password-reset")
    return s.dumps({"uid": user_id})


def load_reset_token(token: str) -> int:
    """Raises SignatureExpired / BadSignature for unusable tokens."""
    s = _get_serializer("PASSWORD_RESET_SALT", "lwd-password-reset")
    max_age = int(current_app.config.get("PASSWORD_RESET_MAX_AGE", 3600))
    try:
        return _load_uid(s, token, max_age)
    except (TypeError, ValueError):
        raise BadSignature("Malformed reset token")


__all__ = [
    "issue_auth_token",
    "load_auth_token",
    "gen_reset_token",
    "load_reset_token",
    "BadSignature",
    "SignatureExpired",
]
