from decimal import Decimal, InvalidOperation

from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required, current_user
from sqlalchemy import update
from sqlalchemy.orm import selectinload

from livewithdesigns.extensions import db
from livewithdesigns.errors import ValidationError
from livewithdesigns.models import Order, OrderItem, Product
from livewithdesigns.models.base import iso
from livewithdesigns.auth.decorators import admin_required
from livewithdesigns.api.utils.filters import get_payload, int_value, quantity_value
from livewithdesigns.api.utils.pagination import page_args, paginate
from livewithdesigns.services.order_notifications import send_order_confirmation

order_bp = Blueprint("order_bp", __name__, url_prefix="/api/orders")


def _to_decimal(val, field: str = "") -> Decimal:
    if val in (None, ""):
        return Decimal("0.00")
    try:
        d = Decimal(str(val))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid value for {field or 'amount'}")
    if d < 0:
        raise ValidationError(f"{field or 'Amount'} cannot be negative")
    return d


def _money(x):
    return float(x) if x is not None else None


def order_dict(o: Order) -> dict:
    return {
        "id": o.id,
        "user": (
            {"id": o.user.id, "name": o.user.name, "email": o.user.email}
            if o.user else o.user_id
        ),
        "items": [
            {
                "id": it.id,
                "product": it.product_id,
                "name": it.name,
                "price": _money(it.price),
                "image": it.image,
                "quantity": it.quantity,
                "variant": it.variant,
                "subtotal": float(it.price) * it.quantity,
            }
            for it in o.items
        ],
        "shippingAddress": o.shipping_address,
        "paymentMethod": o.payment_method,
        "paymentStatus": o.payment_status,
        "orderStatus": o.order_status,
        "totalAmount": _money(o.total_amount),
        "taxAmount": _money(o.tax_amount),
        "shippingCost": _money(o.shipping_cost),
        "trackingNumber": o.tracking_number,
        "estimatedDelivery": iso(o.estimated_delivery),
        "paidAt": iso(o.paid_at),
        "statusHistory": [
            {
                "status": h.status,
                "note": h.note,
                "changedBy": h.changed_by,
                "changedAt": iso(h.changed_at),
            }
            for h in o.status_history
        ],
        "createdAt": iso(o.created_at),
        "updatedAt": iso(o.updated_at),
    }


def _own_order(order_id: int) -> Order | None:
    return Order.query.filter_by(id=order_id, user_id=current_user.id).first()


def _not_found():
    return jsonify({"message": "Order not found"}), 404


def _product_image(p: Product):
    if p.thumbnail:
        return p.thumbnail
    for img in p.images or []:
        if isinstance(img, dict) and img.get("url"):
            return img["url"]
    return None


def _take_stock(product: Product, qty: int) -> bool:
    """Decrement stock only while enough is left; False when another order got there first."""
    result = db.session.execute(
        update(Product)
        .where(Product.id == product.id, Product.stock_quantity >= qty)
        .values(
            stock_quantity=Product.stock_quantity - qty,
            in_stock=(Product.stock_quantity - qty) > 0,
        )
        .execution_options(synchronize_session=False)
    )
    db.session.expire(product, ["stock_quantity", "in_stock"])
    return result.rowcount == 1


@order_bp.post("/")
@login_required
def create_order():
    data = get_payload()
    items_in = data.get("items") or []
    if not isinstance(items_in, list) or not items_in:
        return jsonify({"message": "No order items"}), 400

    tax = _to_decimal(data.get("taxAmount"), "taxAmount")
    shipping = _to_decimal(data.get("shippingCost"), "shippingCost")

    # shipping address and payment method are validated before any stock moves
    order = Order(
        user_id=current_user.id,
        shipping_address=data.get("shippingAddress"),
        payment_method=data.get("paymentMethod"),
        tax_amount=tax,
        shipping_cost=shipping,
    )

    subtotal = Decimal("0.00")
    for it in items_in:
        if not isinstance(it, dict):
            return jsonify({"message": "Invalid order item"}), 400
        pid = int_value(it.get("product") or it.get("productId"))
        qty = quantity_value(it.get("quantity"), 1)
        if qty < 1:
            return jsonify({"message": "Quantity must be at least 1"}), 400

        product = db.session.get(Product, pid) if pid is not None else None
        if not product:
            db.session.rollback()
            return jsonify({"message": f"Product {it.get('product') or it.get('productId')} not found"}), 404

        if product.stock_quantity < qty or not _take_stock(product, qty):
            name = product.name
            db.session.rollback()
            return jsonify({"message": f"Insufficient stock for {name}"}), 400

        price = Decimal(str(product.price))
        subtotal += price * qty
        order.items.append(OrderItem(
            product_id=product.id,
            name=product.name,
            price=price,
            image=_product_image(product),
            quantity=qty,
            variant=it.get("variant"),
        ))

    order.total_amount = (subtotal + tax + shipping).quantize(Decimal("0.01"))
    order.set_status("processing", note="Order placed", changed_by=current_user.id)
    db.session.add(order)
    db.session.commit()
    current_app.logger.info(
        "[ORDER] created id=%s user=%s total=%s items=%s",
        order.id, current_user.id, order.total_amount, len(order.items),
    )

    send_order_confirmation(order)
    return jsonify({"success": True, "data": order_dict(order)}), 201


@order_bp.get("/")
@login_required
def my_orders():
    items = (
        Order.query.options(selectinload(Order.items), selectinload(Order.status_history))
        .filter(Order.user_id == current_user.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return jsonify({"success": True, "data": [order_dict(o) for o in items]}), 200


@order_bp.get("/all")
@admin_required
def all_orders():
    page, limit = page_args(10)
    q = Order.query.options(selectinload(Order.user), selectinload(Order.items))
    if request.args.get("status"):
        q = q.filter(Order.order_status == request.args.get("status"))
    q = q.order_by(Order.created_at.desc(), Order.id.desc())

    items, pagination = paginate(q, page, limit, "Orders")
    return jsonify({
        "success": True,
        "data": [order_dict(o) for o in items],
        "pagination": pagination,
    }), 200


@order_bp.get("/<int:order_id>")
@login_required
def get_order(order_id: int):
    o = _own_order(order_id)
    if not o:
        return _not_found()
    return jsonify({"success": True, "data": order_dict(o)}), 200


@order_bp.put("/<int:order_id>/cancel")
@login_required
def cancel_order(order_id: int):
    o = _own_order(order_id)
    if not o:
        return _not_found()
    if o.order_status != "processing":
        return jsonify({"message": "Cannot cancel order that is not in processing state"}), 400

    o.set_status("cancelled", note="Cancelled by customer", changed_by=current_user.id)
    db.session.commit()
    current_app.logger.info("[ORDER] cancelled id=%s by user=%s", o.id, current_user.id)
    return jsonify({"success": True, "data": order_dict(o)}), 200


@order_bp.get("/<int:order_id>/track")
@login_required
def track_order(order_id: int):
    o = _own_order(order_id)
    if not o:
        return _not_found()
    return jsonify({
        "success": True,
        "data": {
            "id": o.id,
            "orderStatus": o.order_status,
            "estimatedDelivery": iso(o.estimated_delivery),
            "trackingNumber": o.tracking_number,
            "shippingAddress": o.shipping_address,
            "statusHistory": order_dict(o)["statusHistory"],
        },
    }), 200
