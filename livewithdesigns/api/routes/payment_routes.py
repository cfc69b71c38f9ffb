# livewithdesigns/api/routes/payment_routes.py
from flask import Blueprint, jsonify, current_app
from flask_login import login_required, current_user

from livewithdesigns.extensions import db
from livewithdesigns.models import Order, Payment
from livewithdesigns.models.base import utcnow, iso
from livewithdesigns.api.utils.filters import get_payload, int_value
from livewithdesigns.services import payment_gateway
from livewithdesigns.services.order_notifications import on_order_paid

payment_bp = Blueprint("payment_bp", __name__, url_prefix="/api/payments")


def _payment_dict(p: Payment) -> dict:
    return {
        "id": p.id,
        "order": p.order_id,
        "gatewayOrderId": p.gateway_order_id,
        "gatewayPaymentId": p.gateway_payment_id,
        "amount": float(p.amount) if p.amount is not None else None,
        "currency": p.currency,
        "status": p.status,
        "verifiedAt": iso(p.verified_at),
        "createdAt": iso(p.created_at),
    }


@payment_bp.get("/config")
@login_required
def payment_config():
    return jsonify({
        "success": True,
        "data": {
            "keyId": current_app.config.get("PAYMENT_KEY_ID"),
            "currency": current_app.config.get("PAYMENT_CURRENCY", "INR"),
        },
    }), 200


@payment_bp.post("/create-order")
@login_required
def create_payment_order():
    data = get_payload()
    order_id = int_value(data.get("orderId"))
    order = Order.query.filter_by(id=order_id, user_id=current_user.id).first() if order_id else None
    if not order:
        return jsonify({"message": "Order not found"}), 404
    if order.payment_status == "completed":
        return jsonify({"message": "Order is already paid"}), 400
    if order.order_status == "cancelled":
        return jsonify({"message": "Cannot pay for a cancelled order"}), 400

    currency = current_app.config.get("PAYMENT_CURRENCY", "INR")
    amount_minor = payment_gateway.to_minor_units(order.total_amount)
    try:
        gw = payment_gateway.create_gateway_order(amount_minor, currency, receipt=f"order_{order.id}")
    except payment_gateway.PaymentGatewayError as e:
        return jsonify({"message": str(e)}), 502

    payment = Payment(
        order_id=order.id,
        gateway_order_id=gw["id"],
        amount=order.total_amount,
        currency=currency,
        status="created",
    )
    db.session.add(payment)
    db.session.commit()
    current_app.logger.info("[PAYMENT] gateway order %s for order %s", gw["id"], order.id)

    return jsonify({
        "success": True,
        "data": {
            "gatewayOrderId": gw["id"],
            "amount": amount_minor,
            "currency": currency,
            "keyId": current_app.config.get("PAYMENT_KEY_ID"),
            "orderId": order.id,
        },
    }), 201


@payment_bp.post("/verify")
@login_required
def verify_payment():
    data = get_payload()
    gateway_order_id = (data.get("gatewayOrderId") or data.get("razorpay_order_id") or "").strip()
    payment_id = (data.get("paymentId") or data.get("razorpay_payment_id") or "").strip()
    signature = (data.get("signature") or data.get("razorpay_signature") or "").strip()

    if not (gateway_order_id and payment_id and signature):
        return jsonify({"message": "Missing payment details"}), 400

    payment = Payment.query.filter_by(gateway_order_id=gateway_order_id).first()
    if not payment or payment.order.user_id != current_user.id:
        return jsonify({"message": "Payment not found"}), 404

    order = payment.order
    if order.order_status == "cancelled":
        current_app.logger.warning(
            "[PAYMENT] %s arrived for cancelled order %s, not applied", payment_id, order.id
        )
        return jsonify({"message": "Cannot pay for a cancelled order"}), 400

    payment.gateway_payment_id = payment_id
    payment.signature = signature
    secret = current_app.config.get("PAYMENT_KEY_SECRET") or ""

    if not payment_gateway.verify_signature(gateway_order_id, payment_id, signature, secret):
        payment.status = "failed"
        order.payment_status = "failed"
        db.session.commit()
        current_app.logger.warning("[PAYMENT] signature mismatch for %s", gateway_order_id)
        return jsonify({"success": False, "message": "Invalid payment signature"}), 400

    already_paid = order.payment_status == "completed"
    payment.status = "captured"
    payment.verified_at = utcnow()
    order.payment_status = "completed"
    if not already_paid:
        order.paid_at = utcnow()
        order.add_history_note(f"Payment {payment_id} received", changed_by=current_user.id)
    db.session.commit()
    current_app.logger.info("[PAYMENT] captured %s for order %s", payment_id, order.id)

    if not already_paid:
        on_order_paid(order)

    return jsonify({
        "success": True,
        "message": "Payment verified successfully",
        "data": _payment_dict(payment),
    }), 200
