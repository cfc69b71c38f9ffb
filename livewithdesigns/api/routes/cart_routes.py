from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from livewithdesigns.extensions import db
from livewithdesigns.models import Cart, CartItem, Product
from livewithdesigns.models.base import iso
from livewithdesigns.api.utils.filters import get_payload, int_value, quantity_value
from livewithdesigns.api.routes.product_routes import product_dict

api_cart = Blueprint("api_cart", __name__, url_prefix="/api/cart")


def _cart_dict(cart: Cart) -> dict:
    items = [it for it in cart.items if it.product]
    return {
        "id": cart.id,
        "user": cart.user_id,
        "items": [
            {
                "product": product_dict(it.product),
                "quantity": it.quantity,
                "addedAt": iso(it.added_at),
            }
            for it in items
        ],
        "total": round(cart.total, 2),
        "updatedAt": iso(cart.updated_at),
    }


def _user_cart() -> Cart | None:
    return Cart.query.filter_by(user_id=current_user.id).first()


def get_or_create_cart(user_id: int) -> Cart:
    cart = Cart.query.filter_by(user_id=user_id).first()
    if not cart:
        cart = Cart(user_id=user_id)
        db.session.add(cart)
    return cart


def add_item(cart: Cart, product: Product, quantity: int) -> CartItem:
    """Add `quantity` of a product, merging with an existing line."""
    item = cart.find_item(product.id)
    if item:
        item.quantity += quantity
    else:
        item = CartItem(product=product, quantity=quantity)
        cart.items.append(item)
    return item


def _cart_response(cart: Cart):
    return jsonify({"success": True, "data": _cart_dict(cart)}), 200


@api_cart.get("/")
@login_required
def get_cart():
    cart = _user_cart()
    if not cart:
        return jsonify({"success": True, "data": {"items": [], "total": 0}}), 200
    return _cart_response(cart)


@api_cart.post("/add")
@login_required
def add_to_cart():
    data = get_payload()
    product_id = int_value(data.get("product") or data.get("productId"))
    quantity = quantity_value(data.get("quantity"), 1)
    if quantity < 1:
        return jsonify({"message": "Quantity must be at least 1"}), 400

    product = db.session.get(Product, product_id) if product_id is not None else None
    if not product:
        return jsonify({"message": "Product not found"}), 404

    cart = get_or_create_cart(current_user.id)
    existing = cart.find_item(product.id)
    wanted = quantity + (existing.quantity if existing else 0)
    if product.stock_quantity < wanted:
        return jsonify({"message": "Insufficient stock"}), 400

    add_item(cart, product, quantity)
    db.session.commit()
    return _cart_response(cart)


@api_cart.put("/update")
@login_required
def update_cart_item():
    data = get_payload()
    product_id = int_value(data.get("product") or data.get("productId"))
    quantity = quantity_value(data.get("quantity"), 0)

    cart = _user_cart()
    if not cart:
        return jsonify({"message": "Cart not found"}), 404
    item = cart.find_item(product_id)
    if not item:
        return jsonify({"message": "Item not found in cart"}), 404

    if quantity <= 0:
        cart.items.remove(item)
    else:
        if item.product and item.product.stock_quantity < quantity:
            return jsonify({"message": "Insufficient stock"}), 400
        item.quantity = quantity

    db.session.commit()
    return _cart_response(cart)


@api_cart.delete("/<int:product_id>")
@login_required
def remove_from_cart(product_id: int):
    cart = _user_cart()
    if not cart:
        return jsonify({"message": "Cart not found"}), 404
    item = cart.find_item(product_id)
    if item:
        cart.items.remove(item)
        db.session.commit()
    return _cart_response(cart)


@api_cart.post("/clear")
@login_required
def clear_cart():
    cart = _user_cart()
    if not cart:
        return jsonify({"message": "Cart not found"}), 404
    cart.items.clear()
    db.session.commit()
    return jsonify({"success": True, "message": "Cart cleared successfully"}), 200
