from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from livewithdesigns.extensions import db
from livewithdesigns.models import Wishlist, WishlistItem, Product
from livewithdesigns.models.base import iso
from livewithdesigns.api.utils.filters import get_payload, int_value
from livewithdesigns.api.routes.product_routes import product_dict
from livewithdesigns.api.routes.cart_routes import get_or_create_cart, add_item

api_wishlist = Blueprint("api_wishlist", __name__, url_prefix="/api/wishlist")


def _wishlist_dict(w: Wishlist) -> dict:
    return {
        "id": w.id,
        "user": w.user_id,
        "items": [
            {"product": product_dict(it.product), "addedAt": iso(it.added_at)}
            for it in w.items
            if it.product
        ],
    }


def _user_wishlist() -> Wishlist | None:
    return Wishlist.query.filter_by(user_id=current_user.id).first()


@api_wishlist.get("/")
@login_required
def get_wishlist():
    w = _user_wishlist()
    if not w:
        return jsonify({"success": True, "data": {"items": []}}), 200
    return jsonify({"success": True, "data": _wishlist_dict(w)}), 200


@api_wishlist.post("/add")
@login_required
def add_to_wishlist():
    data = get_payload()
    product_id = int_value(data.get("product") or data.get("productId"))
    product = db.session.get(Product, product_id) if product_id is not None else None
    if not product:
        return jsonify({"message": "Product not found"}), 404

    w = _user_wishlist()
    if not w:
        w = Wishlist(user_id=current_user.id)
        db.session.add(w)
    # adding twice is a no-op
    if not w.find_item(product.id):
        w.items.append(WishlistItem(product=product))
    db.session.commit()
    return jsonify({"success": True, "data": _wishlist_dict(w)}), 200


@api_wishlist.delete("/<int:product_id>")
@login_required
def remove_from_wishlist(product_id: int):
    w = _user_wishlist()
    if not w:
        return jsonify({"message": "Wishlist not found"}), 404
    item = w.find_item(product_id)
    if item:
        w.items.remove(item)
        db.session.commit()
    return jsonify({"success": True, "data": _wishlist_dict(w)}), 200


@api_wishlist.post("/move-to-cart/<int:product_id>")
@login_required
def move_to_cart(product_id: int):
    w = _user_wishlist()
    if not w:
        return jsonify({"message": "Wishlist not found"}), 404
    item = w.find_item(product_id)
    if not item:
        return jsonify({"message": "Item not found in wishlist"}), 404

    product = item.product
    w.items.remove(item)
    if product:
        add_item(get_or_create_cart(current_user.id), product, 1)
    db.session.commit()
    return jsonify({
        "success": True,
        "message": "Item moved to cart successfully",
        "wishlist": _wishlist_dict(w),
    }), 200
