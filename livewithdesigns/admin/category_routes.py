from flask import jsonify, current_app

from . import admin_bp
from livewithdesigns.extensions import db
from livewithdesigns.models import Category, Project
from livewithdesigns.auth.decorators import admin_required
from livewithdesigns.api.utils.filters import get_payload
from livewithdesigns.api.utils.pagination import page_args, paginate
from livewithdesigns.api.utils.uploads import delete_upload_url
from livewithdesigns.api.routes.category_routes import category_dict, category_name_taken, apply_category_fields
from livewithdesigns.services.categories import deletion_blocker


def _not_found():
    return jsonify({"message": "Category not found"}), 404


@admin_bp.get("/categories")
@admin_required
def list_categories():
    page, limit = page_args(10)
    q = Category.query.order_by(Category.sort_order.asc(), Category.name.asc())
    items, pagination = paginate(q, page, limit, "Categories")
    return jsonify({
        "success": True,
        "data": [category_dict(c) for c in items],
        "pagination": pagination,
    }), 200


@admin_bp.post("/categories")
@admin_required
def add_category():
    data = get_payload()
    if category_name_taken(data.get("name")):
        return jsonify({"message": "Category already exists"}), 400

    c = Category(name=data.get("name"))
    apply_category_fields(c, data)
    db.session.add(c)
    db.session.commit()
    current_app.logger.info("[ADMIN] category created id=%s name=%s", c.id, c.name)
    return jsonify({"success": True, "data": category_dict(c)}), 201


@admin_bp.put("/categories/<int:category_id>")
@admin_required
def edit_category(category_id: int):
    c = db.session.get(Category, category_id)
    if not c:
        return _not_found()

    data = get_payload()
    if data.get("name") and category_name_taken(data.get("name"), exclude_id=c.id):
        return jsonify({"message": "Category already exists"}), 400

    old_image = c.image
    apply_category_fields(c, data)
    db.session.commit()
    if old_image and old_image != c.image:
        delete_upload_url(old_image)
    return jsonify({"success": True, "data": category_dict(c)}), 200


@admin_bp.delete("/categories/<int:category_id>")
@admin_required
def delete_category(category_id: int):
    c = db.session.get(Category, category_id)
    if not c:
        return _not_found()

    blocker = deletion_blocker(c)
    if blocker:
        return jsonify({"message": blocker}), 400

    image = c.image
    db.session.delete(c)
    db.session.commit()
    delete_upload_url(image)
    current_app.logger.info("[ADMIN] category %s deleted", category_id)
    return jsonify({"success": True, "message": "Category deleted successfully"}), 200


@admin_bp.get("/categories/<int:category_id>/stats")
@admin_required
def category_stats(category_id: int):
    c = db.session.get(Category, category_id)
    if not c:
        return _not_found()

    projects = Project.query.filter_by(category_id=c.id).order_by(Project.id.asc()).all()
    return jsonify({
        "success": True,
        "data": {
            "categoryName": c.name,
            "totalProjects": c.project_count,
            "totalViews": sum(p.views or 0 for p in projects),
            "totalLikes": sum(p.likes or 0 for p in projects),
            "projects": [
                {
                    "title": p.title,
                    "slug": p.slug,
                    "views": p.views,
                    "likes": p.likes,
                    "status": p.status,
                }
                for p in projects
            ],
        },
    }), 200
