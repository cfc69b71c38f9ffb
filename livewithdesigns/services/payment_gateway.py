# livewithdesigns/services/payment_gateway.py
"""Thin client for a Razorpay-compatible payment gateway."""
from __future__ import annotations

import base64
import hashlib
import hmac
import json
import urllib.error
import urllib.request
from decimal import Decimal, ROUND_HALF_UP

from flask import current_app


class PaymentGatewayError(RuntimeError):
    pass


def to_minor_units(amount) -> int:
    """Rupees to paise (or any 2-decimal currency to its minor unit)."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_signature(gateway_order_id: str, payment_id: str, secret: str) -> str:
    message = f"{gateway_order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_signature(gateway_order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    if not (gateway_order_id and payment_id and signature and secret):
        return False
    expected = compute_signature(gateway_order_id, payment_id, secret)
    return hmac.compare_digest(expected, str(signature))


def create_gateway_order(amount_minor: int, currency: str, receipt: str) -> dict:
    """Register an order with the gateway; returns its JSON answer (contains `id`)."""
    cfg = current_app.config
    key_id = cfg.get("PAYMENT_KEY_ID")
    key_secret = cfg.get("PAYMENT_KEY_SECRET")
    if not key_id or not key_secret:
        raise PaymentGatewayError("Payment gateway is not configured")

    api_url = f"{(cfg.get('PAYMENT_API_URL') or '').rstrip('/')}/orders"
    payload = json.dumps({
        "amount": amount_minor,
        "currency": currency,
        "receipt": receipt,
    }).encode("utf-8")
    auth = base64.b64encode(f"{key_id}:{key_secret}".encode("utf-8")).decode("ascii")
    req = urllib.request.Request(
        api_url,
        data=payload,
        method="POST",
        headers={"Content-Type": "application/json", "Authorization": f"Basic {auth}"},
    )
    try:
        with urllib.request.urlopen(req, timeout=10) as resp:
            obj = json.loads(resp.read().decode("utf-8"))
    except (urllib.error.URLError, ValueError) as e:
        current_app.logger.exception("[PAYMENT] gateway order creation failed")
        raise PaymentGatewayError(f"Payment gateway request failed: {e}") from e

    if not obj.get("id"):
        raise PaymentGatewayError("Payment gateway returned no order id")
    return obj
