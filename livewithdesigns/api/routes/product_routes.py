from flask import Blueprint, jsonify, request, current_app
from sqlalchemy import func
from sqlalchemy.orm import selectinload

from livewithdesigns.extensions import db
from livewithdesigns.models import Product, Category
from livewithdesigns.models.base import iso
from livewithdesigns.models.product import PRODUCT_CATEGORIES
from livewithdesigns.auth.decorators import admin_required
from livewithdesigns.api.utils.filters import (
    get_payload, search_filter, contains, float_arg, bool_arg, to_bool, int_value, parse_json_field, parse_list,
)
from livewithdesigns.api.utils.pagination import page_args, paginate
from livewithdesigns.api.utils.slugs import slugify, unique_slug
from livewithdesigns.api.utils.uploads import process_and_save_image, check_upload, upload_url, delete_upload

api_products = Blueprint("api_products", __name__, url_prefix="/api/products")

SORT_PRESETS = {
    "price-low": Product.price.asc(),
    "price-high": Product.price.desc(),
    "rating": Product.rating.desc(),
    "name": Product.name.asc(),
}
SORT_FIELDS = {
    "createdAt": Product.created_at,
    "updatedAt": Product.updated_at,
    "price": Product.price,
    "name": Product.name,
    "rating": Product.rating,
    "reviewCount": Product.review_count,
    "stockQuantity": Product.stock_quantity,
}


def _category_brief(c: Category | None):
    if not c:
        return None
    return {"id": c.id, "name": c.name, "slug": c.slug, "image": c.image}


def product_dict(p: Product) -> dict:
    return {
        "id": p.id,
        "name": p.name,
        "slug": p.slug,
        "category": _category_brief(p.category),
        "categoryName": p.category_name,
        "price": float(p.price) if p.price is not None else None,
        "originalPrice": float(p.original_price) if p.original_price is not None else None,
        "description": p.description,
        "shortDescription": p.short_description,
        "color": p.color,
        "material": p.material,
        "dimensions": p.dimensions,
        "weight": p.weight,
        "stockQuantity": p.stock_quantity,
        "inStock": p.in_stock,
        "tags": p.tags or [],
        "images": p.images or [],
        "thumbnail": p.thumbnail,
        "isFeatured": p.is_featured,
        "isActive": p.is_active,
        "sku": p.sku,
        "rating": p.rating,
        "reviewCount": p.review_count,
        "createdAt": iso(p.created_at),
        "updatedAt": iso(p.updated_at),
    }


def _resolve_category(raw):
    cid = int_value(raw)
    return db.session.get(Category, cid) if cid is not None else None


def _store_image(fs) -> dict:
    check_upload(fs, "image")
    name = process_and_save_image(fs)
    return {"url": upload_url(name), "publicId": name}


def _remove_images(images) -> None:
    for img in images or []:
        if isinstance(img, dict) and img.get("publicId"):
            delete_upload(img["publicId"])


def _apply_fields(p: Product, data: dict) -> None:
    """Copy the editable fields present in `data` onto the product."""
    simple = {
        "name": "name",
        "price": "price",
        "originalPrice": "original_price",
        "description": "description",
        "shortDescription": "short_description",
        "color": "color",
        "material": "material",
        "sku": "sku",
        "stockQuantity": "stock_quantity",
    }
    for key, attr in simple.items():
        if key in data:
            setattr(p, attr, data.get(key))
    if "tags" in data:
        p.tags = parse_list(data.get("tags"))
    if "dimensions" in data:
        p.dimensions = parse_json_field(data.get("dimensions"))
    if "weight" in data:
        p.weight = parse_json_field(data.get("weight"))
    if "isFeatured" in data:
        p.is_featured = to_bool(data.get("isFeatured"))
    if "isActive" in data:
        p.is_active = to_bool(data.get("isActive"), True)


# ========================= Endpoints =========================

@api_products.get("/")
def get_products():
    page, limit = page_args(12)
    q = Product.query.options(selectinload(Product.category)).filter(Product.is_active.is_(True))

    category = (request.args.get("category") or "").strip()
    if category and category != "All":
        q = q.filter(Product.category_name == category)

    cond = search_filter(request.args.get("search"), Product.name, Product.description, Product.tags)
    if cond is not None:
        q = q.filter(cond)

    min_price = float_arg("minPrice")
    max_price = float_arg("maxPrice")
    if min_price is not None:
        q = q.filter(Product.price >= min_price)
    if max_price is not None:
        q = q.filter(Product.price <= max_price)

    material = (request.args.get("material") or "").strip()
    if material:
        q = q.filter(func.lower(Product.material) == material.lower())
    if bool_arg("inStock"):
        q = q.filter(Product.in_stock.is_(True))
    if bool_arg("isFeatured"):
        q = q.filter(Product.is_featured.is_(True))

    sort_by = request.args.get("sortBy") or "createdAt"
    if sort_by in SORT_PRESETS:
        order = SORT_PRESETS[sort_by]
    else:
        col = SORT_FIELDS.get(sort_by, Product.created_at)
        order = col.asc() if request.args.get("sortOrder") == "asc" else col.desc()
    q = q.order_by(order, Product.id.desc())

    items, pagination = paginate(q, page, limit, "Products")
    return jsonify({
        "success": True,
        "data": [product_dict(p) for p in items],
        "pagination": pagination,
    }), 200


@api_products.get("/categories")
def get_product_categories():
    rows = (
        db.session.query(Product.category_name, func.count(Product.id))
        .filter(Product.is_active.is_(True))
        .group_by(Product.category_name)
        .all()
    )
    counts = {name: count for name, count in rows}
    data = [{"name": name, "count": counts.get(name, 0)} for name in PRODUCT_CATEGORIES]
    return jsonify({"success": True, "data": data}), 200


@api_products.get("/featured")
def get_featured_products():
    items = (
        Product.query.options(selectinload(Product.category))
        .filter(Product.is_active.is_(True), Product.is_featured.is_(True))
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(8)
        .all()
    )
    return jsonify({"success": True, "data": [product_dict(p) for p in items]}), 200


@api_products.get("/materials")
def get_materials():
    rows = (
        db.session.query(Product.material)
        .filter(Product.is_active.is_(True), Product.material.isnot(None), Product.material != "")
        .distinct()
        .order_by(Product.material.asc())
        .all()
    )
    return jsonify({"success": True, "data": [r[0] for r in rows]}), 200


@api_products.get("/<identifier>")
def get_product(identifier: str):
    if identifier.isdigit():
        p = db.session.get(Product, int(identifier))
    else:
        p = Product.query.filter_by(slug=identifier, is_active=True).first()
    if not p:
        return jsonify({"message": "Product not found"}), 404

    related = (
        Product.query.options(selectinload(Product.category))
        .filter(Product.id != p.id, Product.category_id == p.category_id, Product.is_active.is_(True))
        .order_by(Product.created_at.desc())
        .limit(4)
        .all()
    )
    return jsonify({
        "success": True,
        "data": product_dict(p),
        "relatedProducts": [product_dict(r) for r in related],
    }), 200


@api_products.post("/")
@admin_required
def add_product():
    data = get_payload()
    category = _resolve_category(data.get("category") or data.get("categoryId"))
    if not category:
        return jsonify({"message": "Invalid category ID"}), 400

    p = Product(
        name=data.get("name"),
        price=data.get("price"),
        category=category,
        category_name=category.name,
        stock_quantity=data.get("stockQuantity") or 0,
    )
    _apply_fields(p, data)
    p.slug = unique_slug(Product, slugify(p.name, fallback="product"))

    image_file = request.files.get("image")
    if image_file and image_file.filename:
        img = _store_image(image_file)
        p.thumbnail = img["url"]
        p.images = [img]

    db.session.add(p)
    db.session.commit()
    current_app.logger.info("[PRODUCT] created id=%s slug=%s", p.id, p.slug)
    return jsonify({"success": True, "data": product_dict(p)}), 201


@api_products.put("/<int:product_id>")
@admin_required
def update_product(product_id: int):
    p = db.session.get(Product, product_id)
    if not p:
        return jsonify({"message": "Product not found"}), 404

    data = get_payload()
    raw_category = data.get("category") or data.get("categoryId")
    if raw_category not in (None, "") and int_value(raw_category) != p.category_id:
        category = _resolve_category(raw_category)
        if not category:
            return jsonify({"message": "Invalid category ID"}), 400
        p.category = category
        p.category_name = category.name

    _apply_fields(p, data)

    image_file = request.files.get("image")
    if image_file and image_file.filename:
        old_images = list(p.images or [])
        img = _store_image(image_file)
        p.thumbnail = img["url"]
        p.images = [img]
        _remove_images(old_images)

    db.session.commit()
    return jsonify({"success": True, "data": product_dict(p)}), 200


@api_products.delete("/<int:product_id>")
@admin_required
def delete_product(product_id: int):
    p = db.session.get(Product, product_id)
    if not p:
        return jsonify({"message": "Product not found"}), 404

    _remove_images(p.images)
    db.session.delete(p)
    db.session.commit()
    current_app.logger.info("[PRODUCT] deleted id=%s", product_id)
    return jsonify({"success": True, "message": "Product deleted successfully"}), 200
