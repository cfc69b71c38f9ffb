from livewithdesigns.extensions import db
from .base import TimestampMixin

PAYMENT_RECORD_STATUSES = ("created", "captured", "failed")


class Payment(TimestampMixin, db.Model):
    __tablename__ = "payment"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    gateway_order_id = db.Column(db.String(64), unique=True, nullable=False, index=True)
    gateway_payment_id = db.Column(db.String(64), nullable=True)
    signature = db.Column(db.String(128), nullable=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    currency = db.Column(db.String(8), nullable=False, default="INR")
    status = db.Column(db.String(20), nullable=False, default="created")  # created | captured | failed
    verified_at = db.Column(db.DateTime, nullable=True)

    def __repr__(self):
        return f"<Payment {self.gateway_order_id} {self.status}>"
