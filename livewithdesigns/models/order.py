from sqlalchemy.orm import validates

from livewithdesigns.extensions import db
from livewithdesigns.errors import ValidationError
from .base import TimestampMixin, utcnow, choice

PAYMENT_METHODS = ("upi", "card", "netbanking", "wallet", "cod")
PAYMENT_STATUSES = ("pending", "completed", "failed")
ORDER_STATUSES = ("processing", "shipped", "delivered", "cancelled")

SHIPPING_FIELDS = {
    "name": "Shipping name is required",
    "phone": "Phone is required",
    "street": "Street is required",
    "city": "City is required",
    "state": "State is required",
    "zipcode": "Zipcode is required",
    "country": "Country is required",
}


class Order(TimestampMixin, db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)

    shipping_address = db.Column(db.JSON, nullable=False)
    payment_method = db.Column(db.String(20), nullable=False)
    payment_status = db.Column(db.String(20), nullable=False, default="pending")
    order_status = db.Column(db.String(20), nullable=False, default="processing", index=True)

    total_amount = db.Column(db.Numeric(12, 2), nullable=False)
    tax_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    shipping_cost = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    tracking_number = db.Column(db.String(100), nullable=True)
    estimated_delivery = db.Column(db.DateTime, nullable=True)
    paid_at = db.Column(db.DateTime, nullable=True)

    user = db.relationship("User", backref=db.backref("orders", lazy=True))
    items = db.relationship(
        "OrderItem", backref="order", lazy=True, cascade="all, delete-orphan"
    )
    status_history = db.relationship(
        "OrderStatusHistory",
        backref="order",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="OrderStatusHistory.id",
    )
    payments = db.relationship("Payment", backref="order", lazy=True, cascade="all, delete-orphan")

    @validates("shipping_address")
    def _validate_shipping(self, key, value):
        if not isinstance(value, dict):
            raise ValidationError("Shipping address is required")
        cleaned = {}
        for field, message in SHIPPING_FIELDS.items():
            v = str(value.get(field) or "").strip()
            if not v:
                raise ValidationError(message)
            cleaned[field] = v
        return cleaned

    @validates("payment_method")
    def _validate_payment_method(self, key, value):
        if not value:
            raise ValidationError("Payment method is required")
        return choice(value, PAYMENT_METHODS, "paymentMethod")

    @validates("payment_status")
    def _validate_payment_status(self, key, value):
        return choice(value, PAYMENT_STATUSES, "paymentStatus", default="pending")

    @validates("order_status")
    def _validate_order_status(self, key, value):
        return choice(value, ORDER_STATUSES, "orderStatus", default="processing")

    def set_status(self, status: str, note: str | None = None, changed_by: int | None = None) -> bool:
        """Change `order_status`, recording a history entry. Returns False when unchanged."""
        if status == self.order_status and self.status_history:
            return False
        self.order_status = status
        self.status_history.append(
            OrderStatusHistory(status=status, note=note, changed_by=changed_by)
        )
        return True

    def add_history_note(self, note: str, changed_by: int | None = None) -> None:
        """Record an event without changing the status."""
        self.status_history.append(
            OrderStatusHistory(status=self.order_status, note=note, changed_by=changed_by)
        )

    def __repr__(self):
        return f"<Order #{self.id} {self.order_status}>"


class OrderItem(db.Model):
    __tablename__ = "order_item"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("product.id", ondelete="SET NULL"), nullable=True)

    # snapshot at time of purchase
    name = db.Column(db.String(200), nullable=False)
    price = db.Column(db.Numeric(12, 2), nullable=False)
    image = db.Column(db.String(500), nullable=True)
    quantity = db.Column(db.Integer, nullable=False)
    variant = db.Column(db.String(100), nullable=True)

    @validates("quantity")
    def _validate_quantity(self, key, value):
        try:
            qty = int(value)
        except (TypeError, ValueError):
            raise ValidationError("Invalid quantity")
        if qty < 1:
            raise ValidationError("Quantity must be at least 1")
        return qty


class OrderStatusHistory(db.Model):
    __tablename__ = "order_status_history"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False)
    status = db.Column(db.String(20), nullable=False)
    note = db.Column(db.String(500), nullable=True)
    changed_by = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    changed_at = db.Column(db.DateTime, nullable=False, default=utcnow)
