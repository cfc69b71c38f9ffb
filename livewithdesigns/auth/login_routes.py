# livewithdesigns/auth/login_routes.py
# Sign-up, login and profile endpoints; answers carry a bearer token.
from flask import Blueprint, jsonify, current_app
from flask_login import login_required, current_user

from livewithdesigns.extensions import db
from livewithdesigns.models.base import iso
from livewithdesigns.models.user import User
from livewithdesigns.api.utils.filters import get_payload
from livewithdesigns.auth.tokens import issue_auth_token

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

MIN_PASSWORD_LENGTH = 6


def user_dict(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "phone": user.phone,
        "createdAt": iso(user.created_at),
    }


def _token_response(user: User, status: int = 200):
    return jsonify({
        "success": True,
        "token": issue_auth_token(user.id),
        "user": user_dict(user),
    }), status


# --- Registration ------------------------------------------------------------
@auth_bp.post("/signup")
def signup():
    data = get_payload()
    name = (data.get("name") or "").strip()
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not name or not email or not password:
        return jsonify({"message": "Please provide name, email and password"}), 400
    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({"message": "Password must be at least 6 characters"}), 400
    if User.query.filter_by(email=email).first():
        return jsonify({"message": "User already exists"}), 400

    user = User(name=name, email=email, phone=data.get("phone"), role="user")
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    current_app.logger.info("[AUTH] new user id=%s email=%s", user.id, user.email)
    return _token_response(user, 201)


# --- Login -------------------------------------------------------------------
@auth_bp.post("/login")
def login():
    data = get_payload()
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not email or not password:
        return jsonify({"message": "Please provide email and password"}), 400

    user = User.query.filter_by(email=email).first()
    # check_password accepts bcrypt and older Werkzeug hashes
    if not user or not user.check_password(password):
        current_app.logger.info("[AUTH] failed login for %r", email)
        return jsonify({"message": "Invalid credentials"}), 401

    return _token_response(user)


@auth_bp.get("/me")
@login_required
def me():
    return jsonify({"success": True, "user": user_dict(current_user)}), 200


@auth_bp.put("/profile/<int:user_id>")
@login_required
def update_profile(user_id: int):
    if current_user.id != user_id and not current_user.is_admin:
        return jsonify({"message": "Not authorized to update this profile"}), 403

    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"message": "User not found"}), 404

    data = get_payload()
    if "name" in data:
        user.name = data.get("name")
    if "email" in data:
        email = (data.get("email") or "").strip().lower()
        clash = User.query.filter(User.email == email, User.id != user.id).first()
        if clash:
            return jsonify({"message": "Email is already in use"}), 400
        user.email = email
    if "phone" in data:
        user.phone = data.get("phone")
    password = data.get("password")
    if password:
        if len(password) < MIN_PASSWORD_LENGTH:
            return jsonify({"message": "Password must be at least 6 characters"}), 400
        user.set_password(password)

    db.session.commit()
    return jsonify({"success": True, "user": user_dict(user)}), 200
