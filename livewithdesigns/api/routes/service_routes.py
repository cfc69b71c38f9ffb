from flask import Blueprint, jsonify, request

from livewithdesigns.extensions import db
from livewithdesigns.models import Service
from livewithdesigns.models.base import iso
from livewithdesigns.auth.decorators import admin_required
from livewithdesigns.api.utils.filters import get_payload, int_value, parse_list
from livewithdesigns.api.utils.pagination import page_args, paginate

api_services = Blueprint("api_services", __name__, url_prefix="/api/services")


def service_dict(s: Service) -> dict:
    return {
        "id": s.id,
        "title": s.title,
        "description": s.description,
        "value": s.value,
        "features": s.features or [],
        "category": s.category,
        "image": s.image,
        "order": s.sort_order,
        "createdAt": iso(s.created_at),
        "updatedAt": iso(s.updated_at),
    }


def _apply_fields(s: Service, data: dict) -> None:
    for key in ("title", "description", "value", "category", "image"):
        if data.get(key):
            setattr(s, key, data.get(key))
    if "features" in data:
        s.features = parse_list(data.get("features"))
    if "order" in data:
        s.sort_order = int_value(data.get("order"), 0)


def _not_found():
    return jsonify({"message": "Service not found"}), 404


@api_services.get("/")
def get_services():
    page, limit = page_args(12)
    q = Service.query
    if request.args.get("category"):
        q = q.filter(Service.category == request.args.get("category"))
    q = q.order_by(Service.sort_order.asc(), Service.created_at.desc(), Service.id.desc())

    items, pagination = paginate(q, page, limit, "Services")
    return jsonify({
        "success": True,
        "data": [service_dict(s) for s in items],
        "pagination": pagination,
    }), 200


@api_services.get("/<int:service_id>")
def get_service(service_id: int):
    s = db.session.get(Service, service_id)
    if not s:
        return _not_found()
    return jsonify({"success": True, "data": service_dict(s)}), 200


@api_services.post("/")
@admin_required
def create_service():
    data = get_payload()
    s = Service(title=data.get("title"), description=data.get("description"))
    _apply_fields(s, data)
    db.session.add(s)
    db.session.commit()
    return jsonify({"success": True, "data": service_dict(s)}), 201


@api_services.put("/<int:service_id>")
@admin_required
def update_service(service_id: int):
    s = db.session.get(Service, service_id)
    if not s:
        return _not_found()
    _apply_fields(s, get_payload())
    db.session.commit()
    return jsonify({"success": True, "data": service_dict(s)}), 200


@api_services.delete("/<int:service_id>")
@admin_required
def delete_service(service_id: int):
    s = db.session.get(Service, service_id)
    if not s:
        return _not_found()
    db.session.delete(s)
    db.session.commit()
    return jsonify({"success": True, "message": "Service removed"}), 200
