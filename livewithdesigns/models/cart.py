from livewithdesigns.extensions import db
from .base import TimestampMixin, utcnow


class Cart(TimestampMixin, db.Model):
    __tablename__ = "cart"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), unique=True, nullable=False)

    items = db.relationship(
        "CartItem", backref="cart", lazy=True, cascade="all, delete-orphan", order_by="CartItem.id"
    )

    def find_item(self, product_id: int):
        return next((it for it in self.items if it.product_id == product_id), None)

    @property
    def total(self) -> float:
        return sum(float(it.product.price) * it.quantity for it in self.items if it.product)


class CartItem(db.Model):
    __tablename__ = "cart_item"
    __table_args__ = (db.UniqueConstraint("cart_id", "product_id", name="uq_cart_item_product"),)

    id = db.Column(db.Integer, primary_key=True)
    cart_id = db.Column(db.Integer, db.ForeignKey("cart.id", ondelete="CASCADE"), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("product.id", ondelete="CASCADE"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    added_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    product = db.relationship("Product")


class Wishlist(TimestampMixin, db.Model):
    __tablename__ = "wishlist"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), unique=True, nullable=False)

    items = db.relationship(
        "WishlistItem", backref="wishlist", lazy=True, cascade="all, delete-orphan",
        order_by="WishlistItem.id",
    )

    def find_item(self, product_id: int):
        return next((it for it in self.items if it.product_id == product_id), None)


class WishlistItem(db.Model):
    __tablename__ = "wishlist_item"
    __table_args__ = (db.UniqueConstraint("wishlist_id", "product_id", name="uq_wishlist_item_product"),)

    id = db.Column(db.Integer, primary_key=True)
    wishlist_id = db.Column(db.Integer, db.ForeignKey("wishlist.id", ondelete="CASCADE"), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("product.id", ondelete="CASCADE"), nullable=False)
    added_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    product = db.relationship("Product")
