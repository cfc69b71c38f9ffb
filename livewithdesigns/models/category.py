from sqlalchemy.orm import validates

from livewithdesigns.extensions import db
from livewithdesigns.api.utils.slugs import slugify
from .base import TimestampMixin, required_text, optional_text, choice

CATEGORY_TYPES = ("product", "project")


class Category(TimestampMixin, db.Model):
    __tablename__ = "category"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False)
    slug = db.Column(db.String(80), nullable=True, index=True)
    type = db.Column(db.String(20), nullable=False, default="product")
    description = db.Column(db.String(500), nullable=True)
    image = db.Column(db.String(500), nullable=True)
    icon = db.Column(db.String(50), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    sort_order = db.Column("order", db.Integer, nullable=False, default=0)
    project_count = db.Column(db.Integer, nullable=False, default=0)

    products = db.relationship("Product", back_populates="category", lazy=True)
    projects = db.relationship("Project", back_populates="category", lazy=True)

    @validates("name")
    def _validate_name(self, key, value):
        name = required_text(
            value, "Category name is required",
            max_len=50, max_message="Category name cannot exceed 50 characters",
        )
        # slug always follows the name
        self.slug = slugify(name, fallback="category")
        return name

    @validates("type")
    def _validate_type(self, key, value):
        return choice(value, CATEGORY_TYPES, "type", default="product")

    @validates("description")
    def _validate_description(self, key, value):
        return optional_text(value, 500, "Description cannot exceed 500 characters")

    def __repr__(self):
        return f"<Category {self.name}>"
