from sqlalchemy.orm import validates

from livewithdesigns.extensions import db
from livewithdesigns.errors import ValidationError
from .base import TimestampMixin, required_text, optional_text

# Fixed storefront category list (names shown in the shop menu)
PRODUCT_CATEGORIES = (
    "Lighting", "Sofas", "Beds", "Wall Decoration",
    "Furniture", "Decor Items", "Tables", "Chairs",
    "Storage", "Outdoor",
)


class Product(TimestampMixin, db.Model):
    __tablename__ = "product"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    category_id = db.Column(db.Integer, db.ForeignKey("category.id"), nullable=False)
    category_name = db.Column(db.String(50), nullable=True, index=True)

    price = db.Column(db.Numeric(12, 2), nullable=False)
    original_price = db.Column(db.Numeric(12, 2), nullable=True)
    description = db.Column(db.Text, nullable=True)
    short_description = db.Column(db.String(300), nullable=True)
    color = db.Column(db.String(60), nullable=True)
    material = db.Column(db.String(100), nullable=True)
    dimensions = db.Column(db.JSON, nullable=True)
    weight = db.Column(db.JSON, nullable=True)

    stock_quantity = db.Column(db.Integer, nullable=False, default=0)
    in_stock = db.Column(db.Boolean, nullable=False, default=False)

    tags = db.Column(db.JSON, nullable=False, default=list)
    images = db.Column(db.JSON, nullable=False, default=list)
    thumbnail = db.Column(db.String(500), nullable=True)

    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    sku = db.Column(db.String(64), nullable=True)

    rating = db.Column(db.Float, nullable=False, default=0)
    review_count = db.Column(db.Integer, nullable=False, default=0)

    category = db.relationship("Category", back_populates="products")

    @validates("name")
    def _validate_name(self, key, value):
        return required_text(value, "Product name is required", 200)

    @validates("price")
    def _validate_price(self, key, value):
        if value is None or value == "":
            raise ValidationError("Price is required")
        try:
            price = float(value)
        except (TypeError, ValueError):
            raise ValidationError("Invalid price")
        if price < 0:
            raise ValidationError("Price cannot be negative")
        return price

    @validates("original_price")
    def _validate_original_price(self, key, value):
        if value is None or value == "":
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValidationError("Invalid original price")

    @validates("stock_quantity")
    def _validate_stock(self, key, value):
        try:
            qty = int(value or 0)
        except (TypeError, ValueError):
            raise ValidationError("Invalid stock quantity")
        if qty < 0:
            raise ValidationError("Stock quantity cannot be negative")
        self.in_stock = qty > 0
        return qty

    @validates("short_description")
    def _validate_short_description(self, key, value):
        return optional_text(value, 300)

    def __repr__(self) -> str:
        return f"<Product {self.name}>"
