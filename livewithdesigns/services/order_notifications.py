# livewithdesigns/services/order_notifications.py
from __future__ import annotations

from flask import current_app

from livewithdesigns.api.utils.email import send_email
from livewithdesigns.models import Order


def _money(x) -> str:
    return f"Rs. {float(x or 0):,.2f}"


def _address_line(order: Order) -> str:
    a = order.shipping_address or {}
    parts = [a.get("street"), a.get("city"), a.get("state"), a.get("zipcode"), a.get("country")]
    return ", ".join(p for p in parts if p)


def send_order_confirmation(order: Order) -> None:
    """Confirmation to the customer plus a note to the shop owner. Failures are only logged."""
    user = order.user
    try:
        if user and user.email:
            lines = [
                f"Hello {user.name},",
                "",
                "thank you for your order. Summary:",
                f"Order #{order.id}",
                f"Ship to: {order.shipping_address.get('name')}, {_address_line(order)}",
                f"Payment method: {order.payment_method}",
                "",
                "Items:",
            ]
            for it in order.items:
                lines.append(f"- {it.name} x {it.quantity} - {_money(it.price)} each")
            lines += [
                "",
                f"Tax: {_money(order.tax_amount)}",
                f"Shipping: {_money(order.shipping_cost)}",
                f"Total: {_money(order.total_amount)}",
                "",
                "We will let you know as soon as it ships.",
                "Live With Designs",
            ]
            send_email(
                subject=f"Order confirmation #{order.id} - Live With Designs",
                recipients=[user.email],
                body="\n".join(lines),
            )
    except Exception:
        current_app.logger.exception("Order confirmation e-mail failed for order %s", order.id)

    try:
        owner = current_app.config.get("ORDER_NOTIFY_EMAIL")
        if owner:
            send_email(
                subject=f"New order #{order.id}",
                recipients=[owner],
                body=(
                    f"Order #{order.id}\n"
                    f"Customer: {user.name if user else '-'} <{user.email if user else '-'}>\n"
                    f"Address: {_address_line(order)}\n"
                    f"Payment: {order.payment_method}\n"
                    f"Total: {_money(order.total_amount)}"
                ),
            )
    except Exception:
        current_app.logger.exception("Owner notification failed for order %s", order.id)


def on_order_paid(order: Order) -> None:
    """Tell the customer that the payment arrived."""
    user = order.user
    current_app.logger.info("[ORDER-PAID] order=%s total=%s", order.id, order.total_amount)
    try:
        if user and user.email:
            send_email(
                subject=f"Payment received for order #{order.id} - Live With Designs",
                recipients=[user.email],
                body=(
                    f"Hello {user.name},\n\n"
                    f"we have received your payment of {_money(order.total_amount)} "
                    f"for order #{order.id}. Your order is now being processed.\n\n"
                    "Live With Designs"
                ),
            )
    except Exception:
        current_app.logger.exception("Payment e-mail failed for order %s", order.id)
