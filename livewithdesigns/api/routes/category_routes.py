from __future__ import annotations

from flask import Blueprint, request, jsonify
from sqlalchemy import func

from livewithdesigns.extensions import db
from livewithdesigns.models import Category
from livewithdesigns.models.base import iso
from livewithdesigns.auth.decorators import admin_required
from livewithdesigns.api.utils.filters import get_payload, to_bool, int_value
from livewithdesigns.services.categories import deletion_blocker

api_categories = Blueprint("api_categories", __name__, url_prefix="/api/categories")


def category_dict(c: Category) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "slug": c.slug,
        "type": c.type,
        "description": c.description,
        "image": c.image,
        "icon": c.icon,
        "isActive": c.is_active,
        "order": c.sort_order,
        "projectCount": c.project_count,
        "createdAt": iso(c.created_at),
        "updatedAt": iso(c.updated_at),
    }


def category_name_taken(name: str, exclude_id: int | None = None) -> bool:
    q = Category.query.filter(func.lower(Category.name) == (name or "").strip().lower())
    if exclude_id:
        q = q.filter(Category.id != exclude_id)
    return q.first() is not None


def apply_category_fields(c: Category, data: dict) -> None:
    if data.get("name"):
        c.name = data.get("name")
    if "type" in data:
        c.type = data.get("type")
    if "description" in data:
        c.description = data.get("description")
    if "image" in data:
        c.image = data.get("image") or None
    if "icon" in data:
        c.icon = data.get("icon") or None
    if "isActive" in data:
        c.is_active = to_bool(data.get("isActive"), True)
    if "order" in data:
        c.sort_order = int_value(data.get("order"), 0)


@api_categories.get("/")
def list_categories():
    q = Category.query.filter(Category.is_active.is_(True))
    if request.args.get("type"):
        q = q.filter(Category.type == request.args.get("type"))
    items = q.order_by(Category.sort_order.asc(), Category.name.asc()).all()
    return jsonify([category_dict(c) for c in items]), 200


@api_categories.get("/<string:slug>")
def get_category_by_slug(slug: str):
    c = Category.query.filter_by(slug=str(slug).strip(), is_active=True).first()
    if not c:
        return jsonify({"message": "Category not found"}), 404
    return jsonify(category_dict(c)), 200


@api_categories.post("/")
@admin_required
def create_category():
    data = get_payload()
    if category_name_taken(data.get("name")):
        return jsonify({"message": "Category already exists"}), 400

    c = Category(name=data.get("name"))
    apply_category_fields(c, data)
    db.session.add(c)
    db.session.commit()
    return jsonify(category_dict(c)), 201


@api_categories.put("/<int:category_id>")
@admin_required
def update_category(category_id: int):
    c = db.session.get(Category, category_id)
    if not c:
        return jsonify({"message": "Category not found"}), 404

    data = get_payload()
    if data.get("name") and category_name_taken(data.get("name"), exclude_id=c.id):
        return jsonify({"message": "Category already exists"}), 400
    apply_category_fields(c, data)
    db.session.commit()
    return jsonify(category_dict(c)), 200


@api_categories.delete("/<int:category_id>")
@admin_required
def delete_category(category_id: int):
    c = db.session.get(Category, category_id)
    if not c:
        return jsonify({"message": "Category not found"}), 404

    blocker = deletion_blocker(c)
    if blocker:
        return jsonify({"message": blocker}), 400
    db.session.delete(c)
    db.session.commit()
    return jsonify({"message": "Category deleted successfully"}), 200
