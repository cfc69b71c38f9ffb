from sqlalchemy.orm import validates

from livewithdesigns.extensions import db
from .base import TimestampMixin, required_text


class Service(TimestampMixin, db.Model):
    __tablename__ = "service"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    value = db.Column(db.String(200), nullable=True)
    features = db.Column(db.JSON, nullable=False, default=list)
    category = db.Column(db.String(100), nullable=True, index=True)
    image = db.Column(db.String(500), nullable=True)
    sort_order = db.Column("order", db.Integer, nullable=False, default=0)

    @validates("title")
    def _validate_title(self, key, value):
        return required_text(value, "Title is required")

    @validates("description")
    def _validate_description(self, key, value):
        return required_text(value, "Description is required")
