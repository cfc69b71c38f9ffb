from sqlalchemy.orm import validates

from livewithdesigns.extensions import db
from .base import TimestampMixin, utcnow, required_text, choice

BLOG_STATUSES = ("draft", "published", "archived")


class Blog(TimestampMixin, db.Model):
    __tablename__ = "blog"

    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    title = db.Column(db.String(250), nullable=False)
    excerpt = db.Column(db.Text, nullable=False)
    content = db.Column(db.Text, nullable=False)
    author = db.Column(db.String(120), nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=utcnow)
    category = db.Column(db.String(100), nullable=True, index=True)
    image = db.Column(db.String(500), nullable=True)
    read_time = db.Column(db.Integer, nullable=True)
    likes = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    status = db.Column(db.String(20), nullable=False, default="draft")

    @validates("slug")
    def _validate_slug(self, key, value):
        return required_text(value, "Slug is required").lower()

    @validates("title")
    def _validate_title(self, key, value):
        return required_text(value, "Title is required")

    @validates("excerpt")
    def _validate_excerpt(self, key, value):
        return required_text(value, "Excerpt is required")

    @validates("content")
    def _validate_content(self, key, value):
        return required_text(value, "Content is required")

    @validates("author")
    def _validate_author(self, key, value):
        return required_text(value, "Author is required")

    @validates("status")
    def _validate_status(self, key, value):
        return choice(value, BLOG_STATUSES, "status", default="draft")
