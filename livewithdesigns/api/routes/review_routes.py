from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from sqlalchemy import func
from sqlalchemy.orm import selectinload

from livewithdesigns.extensions import db
from livewithdesigns.models import Review, Product, Order, OrderItem
from livewithdesigns.models.base import iso
from livewithdesigns.auth.decorators import admin_required
from livewithdesigns.api.utils.filters import get_payload, int_value, to_bool, parse_list
from livewithdesigns.api.utils.pagination import page_args, paginate
from livewithdesigns.services.ratings import recalculate_product_rating

api_reviews = Blueprint("api_reviews", __name__, url_prefix="/api/reviews")

SORT_FIELDS = {
    "createdAt": Review.created_at,
    "rating": Review.rating,
    "helpful": Review.helpful,
}


def _review_dict(r: Review, with_product: bool = False) -> dict:
    d = {
        "id": r.id,
        "product": r.product_id,
        "user": {"id": r.user.id, "name": r.user.name, "email": r.user.email} if r.user else None,
        "rating": r.rating,
        "title": r.title,
        "comment": r.comment,
        "images": r.images or [],
        "isVerifiedPurchase": r.is_verified_purchase,
        "helpful": r.helpful,
        "isApproved": r.is_approved,
        "isActive": r.is_active,
        "createdAt": iso(r.created_at),
        "updatedAt": iso(r.updated_at),
    }
    if with_product and r.product:
        p = r.product
        d["product"] = {
            "id": p.id,
            "name": p.name,
            "slug": p.slug,
            "thumbnail": p.thumbnail,
            "price": float(p.price) if p.price is not None else None,
        }
    return d


def _has_delivered_purchase(user_id: int, product_id: int) -> bool:
    q = (
        db.session.query(OrderItem.id)
        .join(Order, Order.id == OrderItem.order_id)
        .filter(
            Order.user_id == user_id,
            Order.order_status == "delivered",
            OrderItem.product_id == product_id,
        )
    )
    return db.session.query(q.exists()).scalar()


def _not_found():
    return jsonify({"success": False, "message": "Review not found"}), 404


@api_reviews.get("/product/<int:product_id>")
def get_product_reviews(product_id: int):
    page, limit = page_args(10)
    visible = (
        Review.product_id == product_id,
        Review.is_active.is_(True),
        Review.is_approved.is_(True),
    )
    col = SORT_FIELDS.get(request.args.get("sortBy") or "createdAt", Review.created_at)
    q = (
        Review.query.options(selectinload(Review.user))
        .filter(*visible)
        .order_by(col.desc(), Review.id.desc())
    )
    items, pagination = paginate(q, page, limit, "Reviews")

    breakdown = {str(star): 0 for star in (5, 4, 3, 2, 1)}
    rows = (
        db.session.query(Review.rating, func.count(Review.id))
        .filter(*visible)
        .group_by(Review.rating)
        .all()
    )
    for rating, count in rows:
        breakdown[str(rating)] = count

    return jsonify({
        "success": True,
        "data": [_review_dict(r) for r in items],
        "ratingBreakdown": breakdown,
        "pagination": pagination,
    }), 200


@api_reviews.post("/")
@login_required
def add_review():
    data = get_payload()
    product_id = int_value(data.get("productId") or data.get("product"))
    product = db.session.get(Product, product_id) if product_id is not None else None
    if not product:
        return jsonify({"success": False, "message": "Product not found"}), 404

    if Review.query.filter_by(product_id=product.id, user_id=current_user.id).first():
        return jsonify({"success": False, "message": "You have already reviewed this product"}), 400

    review = Review(
        product_id=product.id,
        user_id=current_user.id,
        rating=data.get("rating"),
        title=data.get("title"),
        comment=data.get("comment"),
        images=parse_list(data.get("images")),
        is_verified_purchase=_has_delivered_purchase(current_user.id, product.id),
    )
    db.session.add(review)
    recalculate_product_rating(product.id)
    db.session.commit()
    current_app.logger.info("[REVIEW] user=%s product=%s rating=%s", current_user.id, product.id, review.rating)
    return jsonify({
        "success": True,
        "data": _review_dict(review),
        "message": "Review added successfully",
    }), 201


@api_reviews.put("/<int:review_id>")
@login_required
def update_review(review_id: int):
    review = db.session.get(Review, review_id)
    if not review:
        return _not_found()
    if review.user_id != current_user.id:
        return jsonify({"success": False, "message": "Not authorized"}), 403

    data = get_payload()
    # Empty values keep the stored ones
    if data.get("rating") not in (None, ""):
        review.rating = data.get("rating")
    if data.get("title"):
        review.title = data.get("title")
    if data.get("comment"):
        review.comment = data.get("comment")
    if "images" in data:
        review.images = parse_list(data.get("images"))

    recalculate_product_rating(review.product_id)
    db.session.commit()
    return jsonify({
        "success": True,
        "data": _review_dict(review),
        "message": "Review updated successfully",
    }), 200


@api_reviews.delete("/<int:review_id>")
@login_required
def delete_review(review_id: int):
    review = db.session.get(Review, review_id)
    if not review:
        return _not_found()
    if review.user_id != current_user.id and not current_user.is_admin:
        return jsonify({"success": False, "message": "Not authorized"}), 403

    product_id = review.product_id
    db.session.delete(review)
    recalculate_product_rating(product_id)
    db.session.commit()
    return jsonify({"success": True, "message": "Review deleted successfully"}), 200


@api_reviews.post("/<int:review_id>/helpful")
def mark_helpful(review_id: int):
    review = db.session.get(Review, review_id)
    if not review:
        return _not_found()
    review.helpful = (review.helpful or 0) + 1
    db.session.commit()
    return jsonify({"success": True, "data": {"helpful": review.helpful}}), 200


@api_reviews.get("/my-reviews")
@login_required
def my_reviews():
    items = (
        Review.query.options(selectinload(Review.product))
        .filter(Review.user_id == current_user.id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )
    return jsonify({"success": True, "data": [_review_dict(r, with_product=True) for r in items]}), 200


# ========== Admin ==========

@api_reviews.get("/admin/all")
@admin_required
def admin_all_reviews():
    page, limit = page_args(20)
    q = Review.query.options(selectinload(Review.user), selectinload(Review.product))
    if request.args.get("isApproved") is not None:
        q = q.filter(Review.is_approved.is_(to_bool(request.args.get("isApproved"))))
    q = q.order_by(Review.created_at.desc(), Review.id.desc())

    items, pagination = paginate(q, page, limit, "Reviews")
    return jsonify({
        "success": True,
        "data": [_review_dict(r, with_product=True) for r in items],
        "pagination": pagination,
    }), 200


@api_reviews.put("/admin/<int:review_id>/approve")
@admin_required
def approve_review(review_id: int):
    review = db.session.get(Review, review_id)
    if not review:
        return _not_found()

    approved = to_bool(get_payload().get("isApproved"))
    review.is_approved = approved
    recalculate_product_rating(review.product_id)
    db.session.commit()
    return jsonify({
        "success": True,
        "data": _review_dict(review, with_product=True),
        "message": f"Review {'approved' if approved else 'rejected'} successfully",
    }), 200
