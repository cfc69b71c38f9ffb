from sqlalchemy.orm import validates

from livewithdesigns.extensions import db
from livewithdesigns.errors import ValidationError
from .base import TimestampMixin, required_text, optional_text


class Review(TimestampMixin, db.Model):
    __tablename__ = "review"
    # one review per user and product
    __table_args__ = (db.UniqueConstraint("product_id", "user_id", name="uq_review_product_user"),)

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("product.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False)

    rating = db.Column(db.Integer, nullable=False)
    title = db.Column(db.String(100), nullable=True)
    comment = db.Column(db.String(1000), nullable=False)
    images = db.Column(db.JSON, nullable=False, default=list)

    is_verified_purchase = db.Column(db.Boolean, nullable=False, default=False)
    helpful = db.Column(db.Integer, nullable=False, default=0)
    is_approved = db.Column(db.Boolean, nullable=False, default=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    product = db.relationship("Product", backref=db.backref("reviews", lazy=True, passive_deletes=True))
    user = db.relationship("User", backref=db.backref("reviews", lazy=True, passive_deletes=True))

    @validates("rating")
    def _validate_rating(self, key, value):
        if value in (None, ""):
            raise ValidationError("Rating is required")
        try:
            rating = int(value)
        except (TypeError, ValueError):
            raise ValidationError("Invalid rating")
        if rating < 1:
            raise ValidationError("Rating must be at least 1")
        if rating > 5:
            raise ValidationError("Rating cannot exceed 5")
        return rating

    @validates("title")
    def _validate_title(self, key, value):
        return optional_text(value, 100, "Title cannot exceed 100 characters")

    @validates("comment")
    def _validate_comment(self, key, value):
        return required_text(
            value, "Review comment is required",
            max_len=1000, max_message="Comment cannot exceed 1000 characters",
        )
