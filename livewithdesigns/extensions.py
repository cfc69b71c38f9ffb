# livewithdesigns/extensions.py
from __future__ import annotations

import sqlite3

from flask import jsonify
from sqlalchemy import event
from sqlalchemy.engine import Engine
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_bcrypt import Bcrypt
from flask_migrate import Migrate
from flask_cors import CORS
from flask_mail import Mail

# Keep extension instances in one place to avoid circular imports
db = SQLAlchemy()
login_manager = LoginManager()
bcrypt = Bcrypt()
migrate = Migrate()
cors = CORS()
mail = Mail()


@event.listens_for(Engine, "connect")
def _sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE clauses unless this is on for each connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@login_manager.user_loader
def load_user(user_id):
    # Lazy import to avoid circular dependency when loading the model
    from livewithdesigns.models.user import User
    try:
        return db.session.get(User, int(user_id))
    except (TypeError, ValueError):
        return None


@login_manager.request_loader
def load_user_from_request(request):
    """Resolve `Authorization: Bearer <token>` into a user."""
    header = request.headers.get("Authorization", "")
    if not header.lower().startswith("bearer "):
        return None
    token = header.split(" ", 1)[1].strip()
    if not token:
        return None

    from livewithdesigns.auth.tokens import load_auth_token
    from livewithdesigns.models.user import User

    uid = load_auth_token(token)
    if uid is None:
        return None
    return db.session.get(User, uid)


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"message": "Not authorized, no valid token"}), 401


def _coerce_bool(v, default=False) -> bool:
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    s = str(v).strip().lower()
    return s in ("1", "true", "t", "yes", "y", "on")


def _clean_hostname(server: str | None) -> str:
    """Return hostname without scheme/path/spaces."""
    s = (server or "").strip()
    if "://" in s:
        s = s.split("://", 1)[1]
    if "/" in s:
        s = s.split("/", 1)[0]
    return s


def init_mail(app):
    """
    Initialize Flask-Mail after sanitizing the SMTP settings: strip a scheme
    from MAIL_SERVER, never enable SSL and TLS together, derive the port
    from the transport when it is missing, default the sender.
    """
    cfg = app.config

    cfg["MAIL_SERVER"] = _clean_hostname(cfg.get("MAIL_SERVER")) or "localhost"

    use_ssl = _coerce_bool(cfg.get("MAIL_USE_SSL"), False)
    use_tls = _coerce_bool(cfg.get("MAIL_USE_TLS"), False)
    if use_ssl and use_tls:
        cfg["MAIL_USE_TLS"] = False
        use_tls = False
        app.logger.info("MAIL_USE_SSL and MAIL_USE_TLS were both set -> disabling TLS (prefer SSL).")

    try:
        cfg["MAIL_PORT"] = int(cfg.get("MAIL_PORT"))
    except (TypeError, ValueError):
        cfg["MAIL_PORT"] = 465 if use_ssl else (587 if use_tls else 25)
        app.logger.info("MAIL_PORT was invalid -> using %s", cfg["MAIL_PORT"])

    if not cfg.get("MAIL_DEFAULT_SENDER"):
        cfg["MAIL_DEFAULT_SENDER"] = cfg.get("MAIL_USERNAME")

    app.logger.info(
        "MAIL cfg -> server=%s port=%s ssl=%s tls=%s sender=%s suppress=%s",
        cfg.get("MAIL_SERVER"),
        cfg.get("MAIL_PORT"),
        bool(cfg.get("MAIL_USE_SSL")),
        bool(cfg.get("MAIL_USE_TLS")),
        cfg.get("MAIL_DEFAULT_SENDER"),
        bool(cfg.get("MAIL_SUPPRESS_SEND")),
    )

    mail.init_app(app)
