from datetime import datetime

from flask import request, jsonify, current_app
from flask_login import current_user
from sqlalchemy import func
from sqlalchemy.orm import selectinload

from . import admin_bp
from livewithdesigns.extensions import db
from livewithdesigns.errors import ValidationError
from livewithdesigns.models import (
    User, Order, Product, Project, Blog, Service, Category, ContactMessage,
)
from livewithdesigns.auth.decorators import admin_required
from livewithdesigns.auth.login_routes import user_dict
from livewithdesigns.api.utils.filters import get_payload, search_filter
from livewithdesigns.api.utils.pagination import page_args, paginate
from livewithdesigns.api.routes.order_routes import order_dict
from livewithdesigns.api.routes.product_routes import product_dict
from livewithdesigns.api.routes.project_routes import project_dict
from livewithdesigns.api.routes.blog_routes import blog_dict
from livewithdesigns.api.routes.service_routes import service_dict
from livewithdesigns.api.routes.contact_routes import contact_dict


def _page_response(items, pagination, to_dict):
    return jsonify({
        "success": True,
        "data": [to_dict(x) for x in items],
        "pagination": pagination,
    }), 200


def _parse_datetime(value):
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        raise ValidationError("Invalid estimated delivery date")


@admin_bp.get("/dashboard")
@admin_required
def dashboard():
    revenue = (
        db.session.query(func.coalesce(func.sum(Order.total_amount), 0))
        .filter(Order.order_status == "delivered")
        .scalar()
    )
    return jsonify({
        "success": True,
        "data": {
            "totalUsers": User.query.count(),
            "totalOrders": Order.query.count(),
            "totalProducts": Product.query.count(),
            "totalProjects": Project.query.count(),
            "totalBlogs": Blog.query.count(),
            "totalServices": Service.query.count(),
            "totalCategories": Category.query.count(),
            "totalCustomers": User.query.filter_by(role="user").count(),
            "totalRevenue": float(revenue or 0),
            "newOrders": Order.query.filter_by(order_status="processing").count(),
            "pendingOrders": Order.query.filter_by(order_status="shipped").count(),
        },
    }), 200


# ========================= Users =========================

@admin_bp.get("/users")
@admin_required
def list_users():
    page, limit = page_args(10)
    q = User.query.order_by(User.created_at.desc(), User.id.desc())
    items, pagination = paginate(q, page, limit, "Users")
    return _page_response(items, pagination, user_dict)


@admin_bp.put("/users/<int:user_id>")
@admin_required
def update_user_role(user_id: int):
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"message": "User not found"}), 404
    user.role = get_payload().get("role")
    db.session.commit()
    current_app.logger.info("[ADMIN] user %s role -> %s", user.id, user.role)
    return jsonify({"success": True, "data": user_dict(user)}), 200


@admin_bp.delete("/users/<int:user_id>")
@admin_required
def delete_user(user_id: int):
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"message": "User not found"}), 404
    if user.id == current_user.id:
        return jsonify({"message": "You cannot delete your own account"}), 400
    # orders are the sales record and stay
    if Order.query.filter_by(user_id=user.id).count():
        return jsonify({"message": "Cannot delete a user with existing orders"}), 400
    db.session.delete(user)
    db.session.commit()
    current_app.logger.info("[ADMIN] user %s deleted by %s", user_id, current_user.id)
    return jsonify({"message": "User removed"}), 200


# ========================= Orders =========================

@admin_bp.get("/orders")
@admin_required
def list_orders():
    page, limit = page_args(10)
    q = Order.query.options(selectinload(Order.user), selectinload(Order.items))
    if request.args.get("status"):
        q = q.filter(Order.order_status == request.args.get("status"))
    q = q.order_by(Order.created_at.desc(), Order.id.desc())
    items, pagination = paginate(q, page, limit, "Orders")
    return _page_response(items, pagination, order_dict)


@admin_bp.put("/orders/<int:order_id>")
@admin_required
def update_order(order_id: int):
    order = db.session.get(Order, order_id)
    if not order:
        return jsonify({"message": "Order not found"}), 404

    data = get_payload()
    if data.get("orderStatus"):
        changed = order.set_status(
            data.get("orderStatus"),
            note=data.get("note") or f"Status changed to {data.get('orderStatus')}",
            changed_by=current_user.id,
        )
        if changed:
            current_app.logger.info("[ADMIN] order %s -> %s", order.id, order.order_status)
    if data.get("trackingNumber"):
        order.tracking_number = str(data.get("trackingNumber")).strip()
    if data.get("estimatedDelivery"):
        order.estimated_delivery = _parse_datetime(data.get("estimatedDelivery"))
    db.session.commit()
    return jsonify({"success": True, "data": order_dict(order)}), 200


# ========================= Content views =========================

@admin_bp.get("/products")
@admin_required
def list_products():
    page, limit = page_args(10)
    q = Product.query.options(selectinload(Product.category))

    category = (request.args.get("category") or "").strip()
    if category.isdigit():
        q = q.filter(Product.category_id == int(category))
    elif category:
        q = q.filter(Product.category_name == category)

    cond = search_filter(request.args.get("search"), Product.name, Product.description, Product.sku)
    if cond is not None:
        q = q.filter(cond)

    in_stock = request.args.get("inStock")
    if in_stock not in (None, ""):
        q = q.filter(Product.in_stock.is_(in_stock == "true"))

    q = q.order_by(Product.created_at.desc(), Product.id.desc())
    items, pagination = paginate(q, page, limit, "Products")
    return _page_response(items, pagination, product_dict)


@admin_bp.get("/products/<int:product_id>")
@admin_required
def get_product(product_id: int):
    p = db.session.get(Product, product_id)
    if not p:
        return jsonify({"message": "Product not found"}), 404
    return jsonify({"success": True, "data": product_dict(p)}), 200


@admin_bp.get("/projects")
@admin_required
def list_projects():
    page, limit = page_args(10)
    q = Project.query.options(selectinload(Project.category))

    category = (request.args.get("category") or "").strip()
    if category.isdigit():
        q = q.filter(Project.category_id == int(category))
    if request.args.get("status"):
        q = q.filter(Project.status == request.args.get("status"))

    cond = search_filter(request.args.get("search"), Project.title, Project.description, Project.location)
    if cond is not None:
        q = q.filter(cond)

    q = q.order_by(Project.created_at.desc(), Project.id.desc())
    items, pagination = paginate(q, page, limit, "Projects")
    return _page_response(items, pagination, project_dict)


@admin_bp.get("/projects/<int:project_id>")
@admin_required
def get_project(project_id: int):
    p = db.session.get(Project, project_id)
    if not p:
        return jsonify({"message": "Project not found"}), 404
    return jsonify({"success": True, "data": project_dict(p)}), 200


@admin_bp.get("/blogs")
@admin_required
def list_blogs():
    page, limit = page_args(10)
    q = Blog.query
    if request.args.get("category"):
        q = q.filter(Blog.category == request.args.get("category"))

    cond = search_filter(request.args.get("search"), Blog.title, Blog.excerpt, Blog.content)
    if cond is not None:
        q = q.filter(cond)

    q = q.order_by(Blog.created_at.desc(), Blog.id.desc())
    items, pagination = paginate(q, page, limit, "Blogs")
    return _page_response(items, pagination, blog_dict)


@admin_bp.get("/blogs/<int:blog_id>")
@admin_required
def get_blog(blog_id: int):
    b = db.session.get(Blog, blog_id)
    if not b:
        return jsonify({"message": "Blog not found"}), 404
    return jsonify({"success": True, "data": blog_dict(b)}), 200


@admin_bp.get("/services")
@admin_required
def list_services():
    page, limit = page_args(10)
    q = Service.query
    if request.args.get("category"):
        q = q.filter(Service.category == request.args.get("category"))

    cond = search_filter(request.args.get("search"), Service.title, Service.description)
    if cond is not None:
        q = q.filter(cond)

    q = q.order_by(Service.sort_order.asc(), Service.created_at.desc(), Service.id.desc())
    items, pagination = paginate(q, page, limit, "Services")
    return _page_response(items, pagination, service_dict)


@admin_bp.get("/services/<int:service_id>")
@admin_required
def get_service(service_id: int):
    s = db.session.get(Service, service_id)
    if not s:
        return jsonify({"message": "Service not found"}), 404
    return jsonify({"success": True, "data": service_dict(s)}), 200


@admin_bp.get("/contacts")
@admin_required
def list_contacts():
    page, limit = page_args(10)
    q = ContactMessage.query
    if request.args.get("status"):
        q = q.filter(ContactMessage.status == request.args.get("status"))

    cond = search_filter(
        request.args.get("search"), ContactMessage.name, ContactMessage.email, ContactMessage.subject
    )
    if cond is not None:
        q = q.filter(cond)

    q = q.order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
    items, pagination = paginate(q, page, limit, "Messages")
    return _page_response(items, pagination, contact_dict)


@admin_bp.get("/contacts/<int:message_id>")
@admin_required
def get_contact(message_id: int):
    m = db.session.get(ContactMessage, message_id)
    if not m:
        return jsonify({"message": "Contact message not found"}), 404
    return jsonify({"success": True, "data": contact_dict(m)}), 200
