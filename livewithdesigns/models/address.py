import re

from sqlalchemy import event
from sqlalchemy.orm import validates

from livewithdesigns.extensions import db
from livewithdesigns.errors import ValidationError
from .base import TimestampMixin, required_text, optional_text, choice

ADDRESS_TYPES = ("home", "work", "office", "other")
PINCODE_RE = re.compile(r"^[0-9]{6}$")


class Address(TimestampMixin, db.Model):
    __tablename__ = "address"
    __table_args__ = (db.Index("ix_address_user_default", "user_id", "is_default"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    type = db.Column(db.String(20), nullable=False, default="home")
    label = db.Column(db.String(50), nullable=True)
    full_name = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(30), nullable=False)
    alternate_phone = db.Column(db.String(30), nullable=True)
    street = db.Column(db.String(255), nullable=False)
    landmark = db.Column(db.String(255), nullable=True)
    city = db.Column(db.String(100), nullable=False)
    state = db.Column(db.String(100), nullable=False)
    pincode = db.Column(db.String(6), nullable=False)
    country = db.Column(db.String(100), nullable=False, default="India")
    is_default = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    @validates("type")
    def _validate_type(self, key, value):
        return choice(value, ADDRESS_TYPES, "type", default="home")

    @validates("label")
    def _validate_label(self, key, value):
        return optional_text(value, 50, "Label cannot exceed 50 characters")

    @validates("full_name")
    def _validate_full_name(self, key, value):
        return required_text(value, "Full name is required")

    @validates("phone")
    def _validate_phone(self, key, value):
        return required_text(value, "Phone number is required")

    @validates("street")
    def _validate_street(self, key, value):
        return required_text(value, "Street address is required")

    @validates("city")
    def _validate_city(self, key, value):
        return required_text(value, "City is required")

    @validates("state")
    def _validate_state(self, key, value):
        return required_text(value, "State is required")

    @validates("pincode")
    def _validate_pincode(self, key, value):
        pincode = required_text(value, "Pincode is required")
        if not PINCODE_RE.match(pincode):
            raise ValidationError("Please enter a valid 6-digit pincode")
        return pincode

    @validates("country")
    def _validate_country(self, key, value):
        return optional_text(value) or "India"

    @validates("alternate_phone", "landmark")
    def _validate_optional(self, key, value):
        return optional_text(value)


def _clear_other_defaults(mapper, connection, target):
    """Saving a default address takes the flag away from the user's others."""
    if not target.is_default:
        return
    table = Address.__table__
    stmt = table.update().where(table.c.user_id == target.user_id)
    if target.id is not None:
        stmt = stmt.where(table.c.id != target.id)
    connection.execute(stmt.values(is_default=False))


event.listen(Address, "before_insert", _clear_other_defaults)
event.listen(Address, "before_update", _clear_other_defaults)
