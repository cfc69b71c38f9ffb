from sqlalchemy.orm import validates

from livewithdesigns.extensions import db
from livewithdesigns.errors import ValidationError
from .base import TimestampMixin, required_text, optional_text, choice

DESIGN_STYLES = (
    "Modern",
    "Minimalist",
    "Luxury",
    "Scandinavian",
    "Traditional",
    "Contemporary",
    "Industrial",
    "Bohemian",
    "Mid-Century Modern",
    "Rustic",
    "Eclectic",
    "Asian Zen",
    "Art Deco",
)
PROJECT_STATUSES = ("completed", "ongoing", "upcoming")
SIZE_UNITS = ("sqft", "sqm", "sqyd")
DURATION_UNITS = ("days", "weeks", "months")
VIDEO_PLATFORMS = ("youtube", "vimeo", "direct")


class Project(TimestampMixin, db.Model):
    __tablename__ = "project"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    category_id = db.Column(db.Integer, db.ForeignKey("category.id"), nullable=False)
    description = db.Column(db.String(2000), nullable=False)

    client_name = db.Column(db.String(150), nullable=False, default="Confidential Client")
    location = db.Column(db.String(200), nullable=False)
    city = db.Column(db.String(100), nullable=True)
    state = db.Column(db.String(100), nullable=True)

    # Filtered on, so kept as plain columns
    size_value = db.Column(db.Float, nullable=True)
    size_unit = db.Column(db.String(10), nullable=False, default="sqft")
    duration_value = db.Column(db.Float, nullable=True)
    duration_unit = db.Column(db.String(10), nullable=False, default="days")
    budget_min = db.Column(db.Float, nullable=True)
    budget_max = db.Column(db.Float, nullable=True)
    budget_currency = db.Column(db.String(8), nullable=False, default="INR")
    budget_display = db.Column(db.String(100), nullable=True)

    design_style = db.Column(db.String(40), nullable=True)
    highlights = db.Column(db.JSON, nullable=False, default=list)

    thumbnail = db.Column(db.String(500), nullable=False)
    gallery = db.Column(db.JSON, nullable=False, default=list)
    before_after = db.Column(db.JSON, nullable=True)
    video = db.Column(db.JSON, nullable=True)

    materials = db.Column(db.JSON, nullable=False, default=list)
    rooms = db.Column(db.JSON, nullable=False, default=list)
    features = db.Column(db.JSON, nullable=True)
    testimonial = db.Column(db.JSON, nullable=True)

    status = db.Column(db.String(20), nullable=False, default="completed")
    completion_date = db.Column(db.DateTime, nullable=True)

    meta_title = db.Column(db.String(200), nullable=True)
    meta_description = db.Column(db.String(500), nullable=True)
    tags = db.Column(db.JSON, nullable=False, default=list)

    is_active = db.Column(db.Boolean, nullable=False, default=True)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    views = db.Column(db.Integer, nullable=False, default=0)
    likes = db.Column(db.Integer, nullable=False, default=0)

    category = db.relationship("Category", back_populates="projects")

    @validates("title")
    def _validate_title(self, key, value):
        return required_text(
            value, "Project title is required",
            max_len=200, max_message="Title cannot exceed 200 characters",
        )

    @validates("description")
    def _validate_description(self, key, value):
        return required_text(
            value, "Description is required",
            max_len=2000, max_message="Description cannot exceed 2000 characters",
        )

    @validates("category_id")
    def _validate_category(self, key, value):
        if value in (None, ""):
            raise ValidationError("Category is required")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError("Invalid category ID")

    @validates("location")
    def _validate_location(self, key, value):
        return required_text(value, "Location is required")

    @validates("thumbnail")
    def _validate_thumbnail(self, key, value):
        return required_text(value, "Thumbnail image is required")

    @validates("client_name")
    def _validate_client(self, key, value):
        return optional_text(value) or "Confidential Client"

    @validates("design_style")
    def _validate_style(self, key, value):
        return choice(value, DESIGN_STYLES, "designStyle")

    @validates("status")
    def _validate_status(self, key, value):
        return choice(value, PROJECT_STATUSES, "status", default="completed")

    @validates("size_unit")
    def _validate_size_unit(self, key, value):
        return choice(value, SIZE_UNITS, "projectSize.unit", default="sqft")

    @validates("duration_unit")
    def _validate_duration_unit(self, key, value):
        return choice(value, DURATION_UNITS, "duration.unit", default="days")

    @validates("video")
    def _validate_video(self, key, value):
        if value and value.get("platform"):
            choice(value["platform"], VIDEO_PLATFORMS, "video.platform")
        return value

    @validates("testimonial")
    def _validate_testimonial(self, key, value):
        if value and value.get("rating") is not None:
            try:
                rating = float(value["rating"])
            except (TypeError, ValueError):
                raise ValidationError("Invalid testimonial rating")
            if not 1 <= rating <= 5:
                raise ValidationError("Testimonial rating must be between 1 and 5")
        return value

    def __repr__(self):
        return f"<Project {self.slug}>"
