from sqlalchemy.orm import validates

from livewithdesigns.extensions import db
from .base import TimestampMixin, required_text, choice

MEDIA_TYPES = ("image", "video")


class Media(TimestampMixin, db.Model):
    __tablename__ = "media"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    type = db.Column(db.String(10), nullable=False)  # "image" | "video"
    thumbnail = db.Column(db.String(500), nullable=True)
    url = db.Column(db.String(500), nullable=False)
    filename = db.Column(db.String(255), nullable=True)
    category = db.Column(db.String(100), nullable=True, index=True)
    likes = db.Column(db.Integer, nullable=False, default=0)
    shares = db.Column(db.Integer, nullable=False, default=0)

    @validates("title")
    def _validate_title(self, key, value):
        return required_text(value, "Title is required")

    @validates("type")
    def _validate_type(self, key, value):
        required_text(value, "Media type is required")
        return choice(value, MEDIA_TYPES, "type")

    @validates("url")
    def _validate_url(self, key, value):
        return required_text(value, "URL is required")

    def __repr__(self) -> str:
        return f"<Media {self.type} - {self.filename or self.url}>"
