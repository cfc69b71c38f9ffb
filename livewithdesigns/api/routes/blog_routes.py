from datetime import datetime

from flask import Blueprint, jsonify, request

from livewithdesigns.extensions import db
from livewithdesigns.errors import ValidationError
from livewithdesigns.models import Blog
from livewithdesigns.models.base import iso
from livewithdesigns.auth.decorators import admin_required
from livewithdesigns.api.utils.filters import get_payload, to_bool, int_value
from livewithdesigns.api.utils.pagination import page_args, paginate
from livewithdesigns.api.utils.slugs import slugify
from livewithdesigns.api.utils.uploads import check_upload, process_and_save_image, upload_url, delete_upload_url

api_blog = Blueprint("api_blog", __name__, url_prefix="/api/blog")


def blog_dict(b: Blog) -> dict:
    return {
        "id": b.id,
        "slug": b.slug,
        "title": b.title,
        "excerpt": b.excerpt,
        "content": b.content,
        "author": b.author,
        "date": iso(b.date),
        "category": b.category,
        "image": b.image,
        "readTime": b.read_time,
        "likes": b.likes,
        "isActive": b.is_active,
        "status": b.status,
        "createdAt": iso(b.created_at),
        "updatedAt": iso(b.updated_at),
    }


def _slug_taken(slug: str, exclude_id=None) -> bool:
    q = Blog.query.filter(Blog.slug == (slug or "").strip().lower())
    if exclude_id:
        q = q.filter(Blog.id != exclude_id)
    return q.first() is not None


def _apply_fields(b: Blog, data: dict) -> None:
    # Empty values keep what is stored
    for key, attr in (("title", "title"), ("excerpt", "excerpt"), ("content", "content"),
                      ("author", "author"), ("category", "category"), ("status", "status")):
        if data.get(key):
            setattr(b, attr, data.get(key))
    if data.get("readTime"):
        b.read_time = int_value(data.get("readTime"))
    if data.get("image"):
        b.image = data.get("image")
    if "isActive" in data:
        b.is_active = to_bool(data.get("isActive"), True)
    if data.get("date"):
        try:
            b.date = datetime.fromisoformat(str(data["date"]).replace("Z", "+00:00")).replace(tzinfo=None)
        except ValueError:
            raise ValidationError("Invalid date")


def _store_upload(b: Blog) -> None:
    fs = request.files.get("image")
    if fs and fs.filename:
        check_upload(fs, "image")
        old = b.image
        b.image = upload_url(process_and_save_image(fs))
        delete_upload_url(old)


def _not_found():
    return jsonify({"message": "Blog post not found"}), 404


@api_blog.get("/")
def get_blogs():
    page, limit = page_args(12)
    q = Blog.query
    if request.args.get("category"):
        q = q.filter(Blog.category == request.args.get("category"))
    if request.args.get("status"):
        q = q.filter(Blog.status == request.args.get("status"))
    q = q.order_by(Blog.created_at.desc(), Blog.id.desc())

    items, pagination = paginate(q, page, limit, "Blogs")
    return jsonify({
        "success": True,
        "data": [blog_dict(b) for b in items],
        "pagination": pagination,
    }), 200


@api_blog.get("/<slug>")
def get_blog(slug: str):
    b = Blog.query.filter_by(slug=slug.lower()).first()
    if not b:
        return _not_found()
    return jsonify({"success": True, "data": blog_dict(b)}), 200


@api_blog.post("/")
@admin_required
def create_blog():
    data = get_payload()
    slug = data.get("slug") or slugify(data.get("title"), fallback="")
    if slug and _slug_taken(slug):
        return jsonify({"message": "A blog post with this slug already exists"}), 400

    b = Blog(
        slug=slug,
        title=data.get("title"),
        excerpt=data.get("excerpt"),
        content=data.get("content"),
        author=data.get("author"),
    )
    _apply_fields(b, data)
    _store_upload(b)
    db.session.add(b)
    db.session.commit()
    return jsonify({"success": True, "data": blog_dict(b)}), 201


@api_blog.put("/<int:blog_id>")
@admin_required
def update_blog(blog_id: int):
    b = db.session.get(Blog, blog_id)
    if not b:
        return _not_found()

    data = get_payload()
    if data.get("slug"):
        if _slug_taken(data["slug"], exclude_id=b.id):
            return jsonify({"message": "A blog post with this slug already exists"}), 400
        b.slug = data["slug"]
    _apply_fields(b, data)
    _store_upload(b)
    db.session.commit()
    return jsonify({"success": True, "data": blog_dict(b)}), 200


@api_blog.delete("/<int:blog_id>")
@admin_required
def delete_blog(blog_id: int):
    b = db.session.get(Blog, blog_id)
    if not b:
        return _not_found()
    delete_upload_url(b.image)
    db.session.delete(b)
    db.session.commit()
    return jsonify({"success": True, "message": "Blog post removed"}), 200


@api_blog.post("/<int:blog_id>/like")
def like_blog(blog_id: int):
    b = db.session.get(Blog, blog_id)
    if not b:
        return _not_found()
    b.likes = (b.likes or 0) + 1
    db.session.commit()
    return jsonify({"success": True, "likes": b.likes}), 200
