# livewithdesigns/auth/password_reset_routes.py
import time

from flask import jsonify, current_app

from livewithdesigns.extensions import db
from livewithdesigns.api.utils.email import send_email
from livewithdesigns.api.utils.filters import get_payload
from livewithdesigns.auth.login_routes import auth_bp, MIN_PASSWORD_LENGTH
from livewithdesigns.auth.tokens import (
    gen_reset_token,
    load_reset_token,
    BadSignature,
    SignatureExpired,
)

GENERIC_FORGOT_MESSAGE = "If an account with that email exists, a reset link has been sent."


@auth_bp.post("/forgot-password")
def forgot_password():
    """E-mail a reset link. The answer is the same whether or not the account exists."""
    from livewithdesigns.models.user import User

    t0 = time.perf_counter()
    email = (get_payload().get("email") or "").strip().lower()
    current_app.logger.info("[FORGOT] START email=%r", email)

    if not email:
        return jsonify({"message": "Please provide an email"}), 400

    user = User.query.filter_by(email=email).first()
    if not user:
        dt = (time.perf_counter() - t0) * 1000
        current_app.logger.info("[FORGOT] user NOT FOUND -> generic answer (%.1f ms)", dt)
        return jsonify({"success": True, "message": GENERIC_FORGOT_MESSAGE}), 200

    token = gen_reset_token(user.id)
    base_url = (current_app.config.get("PASSWORD_RESET_URL") or "").rstrip("/")
    reset_url = f"{base_url}/{token}"

    body = (
        f"Hello {user.name},\n\n"
        "we received a request to reset the password of your Live With Designs account. "
        "If it was you, open the link below:\n\n"
        f"{reset_url}\n\n"
        "The link is valid for 60 minutes. If you did not ask for this, ignore this e-mail.\n"
    )
    try:
        send_email(
            subject=current_app.config.get("PASSWORD_RESET_SUBJECT", "Password reset - Live With Designs"),
            recipients=[user.email],
            body=body,
        )
        dt = (time.perf_counter() - t0) * 1000
        current_app.logger.info("[FORGOT] mail sent to uid=%s (%.1f ms)", user.id, dt)
    except Exception:
        current_app.logger.exception("[FORGOT] sending reset mail failed for uid=%s", user.id)

    return jsonify({"success": True, "message": GENERIC_FORGOT_MESSAGE}), 200


@auth_bp.post("/reset-password/<token>")
def reset_password(token: str):
    from livewithdesigns.models.user import User

    password = get_payload().get("password") or ""
    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({"message": "Password must be at least 6 characters"}), 400

    try:
        uid = load_reset_token(token)
    except SignatureExpired:
        return jsonify({"message": "Reset link has expired, please request a new one"}), 400
    except BadSignature:
        return jsonify({"message": "Invalid reset link"}), 400

    user = db.session.get(User, uid)
    if not user:
        return jsonify({"message": "User not found"}), 404

    user.set_password(password)
    db.session.commit()
    current_app.logger.info("[RESET] password changed for uid=%s", user.id)
    return jsonify({"success": True, "message": "Password has been reset"}), 200
