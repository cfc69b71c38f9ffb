# livewithdesigns/models/user.py
from flask_login import UserMixin
from sqlalchemy.orm import validates
from werkzeug.security import check_password_hash as wz_check_password_hash

from livewithdesigns.extensions import db, bcrypt
from livewithdesigns.errors import ValidationError
from .base import TimestampMixin, required_text, optional_text, EMAIL_RE

ROLES = ("user", "admin")


class User(TimestampMixin, db.Model, UserMixin):
    __tablename__ = "user"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(200), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="user")
    phone = db.Column(db.String(30), nullable=True)

    @validates("name")
    def _validate_name(self, key, value):
        return required_text(value, "Name is required")

    @validates("email")
    def _validate_email(self, key, value):
        email = required_text(value, "Email is required").lower()
        if not EMAIL_RE.match(email):
            raise ValidationError("Please enter a valid email")
        return email

    @validates("role")
    def _validate_role(self, key, value):
        role = value or "user"
        if role not in ROLES:
            raise ValidationError(f"`{role}` is not a valid role")
        return role

    @validates("phone")
    def _validate_phone(self, key, value):
        return optional_text(value)

    # --- Password handling ---------------------------------------------------
    def set_password(self, password: str) -> None:
        self.password_hash = bcrypt.generate_password_hash(password).decode("utf-8")

    def check_password(self, password: str) -> bool:
        if not self.password_hash or not password:
            return False
        try:
            if bcrypt.check_password_hash(self.password_hash, password):
                return True
        except ValueError:
            pass  # not a bcrypt hash, try the Werkzeug format
        try:
            return wz_check_password_hash(self.password_hash, password)
        except ValueError:
            return False

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self):
        return f"<User {self.email} role={self.role}>"
