from sqlalchemy.orm import validates

from livewithdesigns.extensions import db
from livewithdesigns.errors import ValidationError
from .base import TimestampMixin, utcnow, required_text, optional_text, choice, EMAIL_RE

MESSAGE_STATUSES = ("new", "read", "replied")


class ContactMessage(TimestampMixin, db.Model):
    __tablename__ = "contact_message"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(30), nullable=True)
    subject = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    service_type = db.Column(db.String(100), nullable=True)
    city = db.Column(db.String(100), nullable=True)
    whatsapp_updates = db.Column(db.Boolean, nullable=False, default=False)
    project_id = db.Column(db.Integer, db.ForeignKey("project.id", ondelete="SET NULL"), nullable=True)
    status = db.Column(db.String(20), nullable=False, default="new", index=True)

    responses = db.relationship(
        "ContactResponse", backref="contact_message", lazy=True,
        cascade="all, delete-orphan", order_by="ContactResponse.id",
    )

    @validates("name")
    def _validate_name(self, key, value):
        return required_text(value, "Name is required")

    @validates("email")
    def _validate_email(self, key, value):
        email = required_text(value, "Email is required").lower()
        if not EMAIL_RE.match(email):
            raise ValidationError("Please enter a valid email")
        return email

    @validates("subject")
    def _validate_subject(self, key, value):
        return required_text(value, "Subject is required")

    @validates("message")
    def _validate_message(self, key, value):
        return required_text(value, "Message is required")

    @validates("status")
    def _validate_status(self, key, value):
        return choice(value, MESSAGE_STATUSES, "status", default="new")

    @validates("phone", "service_type", "city")
    def _validate_optional(self, key, value):
        return optional_text(value)


class ContactResponse(db.Model):
    __tablename__ = "contact_response"

    id = db.Column(db.Integer, primary_key=True)
    contact_message_id = db.Column(db.Integer, db.ForeignKey("contact_message.id"), nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=utcnow)
    message = db.Column(db.Text, nullable=False)
    responded_by = db.Column(db.String(120), nullable=True)

    @validates("message")
    def _validate_message(self, key, value):
        return required_text(value, "Response message is required")
