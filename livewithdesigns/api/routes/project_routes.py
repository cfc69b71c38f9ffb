from datetime import datetime

from flask import Blueprint, jsonify, request, current_app
from sqlalchemy import func
from sqlalchemy.orm import selectinload

from livewithdesigns.extensions import db
from livewithdesigns.errors import ValidationError
from livewithdesigns.models import Project, Category
from livewithdesigns.models.base import iso
from livewithdesigns.auth.decorators import admin_required
from livewithdesigns.api.utils.filters import (
    get_payload, search_filter, contains, float_arg, bool_arg, to_bool, int_value, float_value,
    parse_json_field, parse_list,
)
from livewithdesigns.api.utils.pagination import page_args, paginate
from livewithdesigns.api.utils.slugs import slugify, unique_slug
from livewithdesigns.services.categories import refresh_project_count

api_projects = Blueprint("api_projects", __name__, url_prefix="/api/projects")

SORT_FIELDS = {
    "createdAt": Project.created_at,
    "updatedAt": Project.updated_at,
    "title": Project.title,
    "views": Project.views,
    "likes": Project.likes,
    "completionDate": Project.completion_date,
    "budget": Project.budget_min,
    "size": Project.size_value,
}

FILTER_KEYS = (
    "category", "location", "city", "state", "designStyle", "minBudget", "maxBudget",
    "minSize", "maxSize", "status", "isFeatured", "search",
)


def project_dict(p: Project) -> dict:
    return {
        "id": p.id,
        "title": p.title,
        "slug": p.slug,
        "category": {"id": p.category.id, "name": p.category.name, "slug": p.category.slug} if p.category else None,
        "description": p.description,
        "clientName": p.client_name,
        "location": p.location,
        "city": p.city,
        "state": p.state,
        "projectSize": {"value": p.size_value, "unit": p.size_unit},
        "duration": {"value": p.duration_value, "unit": p.duration_unit},
        "budget": {
            "min": p.budget_min,
            "max": p.budget_max,
            "currency": p.budget_currency,
            "display": p.budget_display,
        },
        "designStyle": p.design_style,
        "highlights": p.highlights or [],
        "images": {
            "thumbnail": p.thumbnail,
            "gallery": p.gallery or [],
            "beforeAfter": p.before_after,
        },
        "video": p.video,
        "materials": p.materials or [],
        "rooms": p.rooms or [],
        "features": p.features,
        "testimonial": p.testimonial,
        "status": p.status,
        "completionDate": iso(p.completion_date),
        "metaTitle": p.meta_title,
        "metaDescription": p.meta_description,
        "tags": p.tags or [],
        "isActive": p.is_active,
        "isFeatured": p.is_featured,
        "views": p.views,
        "likes": p.likes,
        "createdAt": iso(p.created_at),
        "updatedAt": iso(p.updated_at),
    }


def _parse_date(value):
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        raise ValidationError("Invalid completion date")


def _apply_fields(p: Project, data: dict) -> None:
    """Flatten the nested request shape onto the project's columns. Only keys present are touched."""
    simple = {
        "title": "title",
        "description": "description",
        "clientName": "client_name",
        "location": "location",
        "city": "city",
        "state": "state",
        "designStyle": "design_style",
        "status": "status",
        "metaTitle": "meta_title",
        "metaDescription": "meta_description",
    }
    for key, attr in simple.items():
        if key in data:
            setattr(p, attr, data.get(key))

    if "category" in data:
        category = db.session.get(Category, int_value(data.get("category"), 0))
        if not category:
            raise ValidationError("Invalid category ID")
        p.category_id = category.id

    if "projectSize" in data:
        size = parse_json_field(data.get("projectSize"), {}) or {}
        p.size_value = float_value(size.get("value"))
        p.size_unit = size.get("unit")
    if "duration" in data:
        duration = parse_json_field(data.get("duration"), {}) or {}
        p.duration_value = float_value(duration.get("value"))
        p.duration_unit = duration.get("unit")
    if "budget" in data:
        budget = parse_json_field(data.get("budget"), {}) or {}
        p.budget_min = float_value(budget.get("min"))
        p.budget_max = float_value(budget.get("max"))
        p.budget_currency = budget.get("currency") or "INR"
        p.budget_display = budget.get("display")
    if "images" in data:
        images = parse_json_field(data.get("images"), {}) or {}
        p.thumbnail = images.get("thumbnail")
        p.gallery = images.get("gallery") or []
        p.before_after = images.get("beforeAfter")

    for key, attr in (("highlights", "highlights"), ("materials", "materials"),
                      ("rooms", "rooms"), ("tags", "tags")):
        if key in data:
            setattr(p, attr, parse_list(data.get(key)))
    for key in ("video", "features", "testimonial"):
        if key in data:
            setattr(p, key, parse_json_field(data.get(key)))

    if "completionDate" in data:
        p.completion_date = _parse_date(data.get("completionDate"))
    if "isActive" in data:
        p.is_active = to_bool(data.get("isActive"), True)
    if "isFeatured" in data:
        p.is_featured = to_bool(data.get("isFeatured"))


def _not_found():
    return jsonify({"message": "Project not found"}), 404


# ========================= Endpoints =========================

@api_projects.get("/")
def get_projects():
    page, limit = page_args(12)
    args = request.args
    q = Project.query.options(selectinload(Project.category)).filter(Project.is_active.is_(True))

    category = (args.get("category") or "").strip()
    if category:
        if category.isdigit():
            q = q.filter(Project.category_id == int(category))
        else:
            cat = Category.query.filter_by(slug=category, type="project").first()
            if cat:
                q = q.filter(Project.category_id == cat.id)

    for key, col in (("location", Project.location), ("city", Project.city), ("state", Project.state)):
        term = (args.get(key) or "").strip()
        if term:
            q = q.filter(contains(col, term))

    if args.get("designStyle"):
        q = q.filter(Project.design_style == args.get("designStyle"))

    min_budget, max_budget = float_arg("minBudget"), float_arg("maxBudget")
    if min_budget is not None:
        q = q.filter(Project.budget_min >= min_budget)
    if max_budget is not None:
        q = q.filter(Project.budget_max <= max_budget)

    min_size, max_size = float_arg("minSize"), float_arg("maxSize")
    if min_size is not None:
        q = q.filter(Project.size_value >= min_size)
    if max_size is not None:
        q = q.filter(Project.size_value <= max_size)

    if args.get("status"):
        q = q.filter(Project.status == args.get("status"))
    if bool_arg("isFeatured"):
        q = q.filter(Project.is_featured.is_(True))

    cond = search_filter(args.get("search"), Project.title, Project.description, Project.tags)
    if cond is not None:
        q = q.filter(cond)

    col = SORT_FIELDS.get(args.get("sortBy") or "createdAt", Project.created_at)
    q = q.order_by(col.asc() if args.get("order") == "asc" else col.desc(), Project.id.desc())

    items, pagination = paginate(q, page, limit, "Projects")
    return jsonify({
        "success": True,
        "data": [project_dict(p) for p in items],
        "pagination": pagination,
        "filters": {key: args.get(key) for key in FILTER_KEYS},
    }), 200


@api_projects.get("/slug/<slug>")
def get_project_by_slug(slug: str):
    p = Project.query.filter_by(slug=slug).first()
    if not p:
        return _not_found()
    p.views = (p.views or 0) + 1
    db.session.commit()
    return jsonify({"success": True, "data": project_dict(p)}), 200


@api_projects.get("/filters/options")
def get_filter_options():
    def _distinct(col):
        rows = db.session.query(col).filter(col.isnot(None), col != "").distinct().order_by(col.asc()).all()
        return [r[0] for r in rows]

    min_budget, max_budget = (
        db.session.query(func.min(Project.budget_min), func.max(Project.budget_max))
        .filter(Project.budget_min.isnot(None))
        .one()
    )
    min_size, max_size = (
        db.session.query(func.min(Project.size_value), func.max(Project.size_value))
        .filter(Project.size_value.isnot(None))
        .one()
    )
    return jsonify({
        "success": True,
        "data": {
            "designStyles": _distinct(Project.design_style),
            "locations": _distinct(Project.location),
            "cities": _distinct(Project.city),
            "states": _distinct(Project.state),
            "budgetRange": {"minBudget": min_budget or 0, "maxBudget": max_budget or 0},
            "sizeRange": {"minSize": min_size or 0, "maxSize": max_size or 0},
        },
    }), 200


@api_projects.get("/<int:project_id>")
def get_project(project_id: int):
    p = db.session.get(Project, project_id)
    if not p:
        return _not_found()
    return jsonify({"success": True, "data": project_dict(p)}), 200


@api_projects.post("/")
@admin_required
def create_project():
    data = get_payload()
    images = parse_json_field(data.get("images"), {}) or {}
    category = db.session.get(Category, int_value(data.get("category"), 0))
    if not category:
        return jsonify({"message": "Invalid category ID"}), 400

    # Required fields go through the constructor so their validators always run
    p = Project(
        title=data.get("title"),
        description=data.get("description"),
        location=data.get("location"),
        category_id=category.id,
        thumbnail=images.get("thumbnail"),
    )
    _apply_fields(p, data)
    p.slug = unique_slug(Project, slugify(data.get("slug") or p.title, fallback="project"))

    db.session.add(p)
    refresh_project_count(p.category_id)
    db.session.commit()
    current_app.logger.info("[PROJECT] created id=%s slug=%s", p.id, p.slug)
    return jsonify({"success": True, "data": project_dict(p)}), 201


@api_projects.put("/<int:project_id>")
@admin_required
def update_project(project_id: int):
    p = db.session.get(Project, project_id)
    if not p:
        return _not_found()

    data = get_payload()
    old_category_id = p.category_id
    _apply_fields(p, data)
    if data.get("slug"):
        p.slug = unique_slug(Project, slugify(data.get("slug"), fallback="project"), exclude_id=p.id)

    if p.category_id != old_category_id:
        refresh_project_count(old_category_id)
        refresh_project_count(p.category_id)
    db.session.commit()
    return jsonify({"success": True, "data": project_dict(p)}), 200


@api_projects.delete("/<int:project_id>")
@admin_required
def delete_project(project_id: int):
    p = db.session.get(Project, project_id)
    if not p:
        return _not_found()

    category_id = p.category_id
    db.session.delete(p)
    refresh_project_count(category_id)
    db.session.commit()
    return jsonify({"success": True, "message": "Project removed"}), 200


@api_projects.post("/<int:project_id>/like")
def like_project(project_id: int):
    p = db.session.get(Project, project_id)
    if not p:
        return _not_found()
    p.likes = (p.likes or 0) + 1
    db.session.commit()
    return jsonify({"success": True, "likes": p.likes}), 200
