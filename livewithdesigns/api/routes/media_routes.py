from flask import Blueprint, jsonify, request, current_app

from livewithdesigns.extensions import db
from livewithdesigns.models import Media
from livewithdesigns.models.base import iso
from livewithdesigns.auth.decorators import admin_required
from livewithdesigns.api.utils.pagination import page_args, paginate
from livewithdesigns.api.utils.uploads import check_upload, save_media, upload_url, delete_upload

api_media = Blueprint("api_media", __name__, url_prefix="/api/media")


def _media_dict(m: Media) -> dict:
    return {
        "id": m.id,
        "title": m.title,
        "description": m.description,
        "type": m.type,
        "thumbnail": m.thumbnail,
        "url": m.url,
        "publicId": m.filename,
        "category": m.category,
        "likes": m.likes,
        "shares": m.shares,
        "createdAt": iso(m.created_at),
    }


@api_media.get("/")
def list_media():
    page, limit = page_args(12)
    q = Media.query
    if request.args.get("category"):
        q = q.filter(Media.category == request.args.get("category"))
    q = q.order_by(Media.created_at.desc(), Media.id.desc())

    items, pagination = paginate(q, page, limit, "Media")
    return jsonify({
        "success": True,
        "data": [_media_dict(m) for m in items],
        "pagination": pagination,
    }), 200


@api_media.post("/")
@admin_required
def upload_media():
    fs = request.files.get("file")
    if not fs or not fs.filename:
        return jsonify({"message": "No file provided"}), 400

    check_upload(fs, "media")
    stored, detected_type = save_media(fs)
    url = upload_url(stored)
    form = request.form
    try:
        m = Media(
            title=form.get("title"),
            description=form.get("description"),
            type=form.get("type") or detected_type,
            category=form.get("category"),
            url=url,
            thumbnail=url,
            filename=stored,
        )
        db.session.add(m)
        db.session.commit()
    except Exception:
        # nothing references the file yet
        db.session.rollback()
        delete_upload(stored)
        raise
    current_app.logger.info("[MEDIA] stored %s (%s)", stored, m.type)
    return jsonify({"success": True, "data": _media_dict(m)}), 201


@api_media.delete("/<int:media_id>")
@admin_required
def delete_media(media_id: int):
    m = db.session.get(Media, media_id)
    if not m:
        return jsonify({"message": "Media not found"}), 404
    delete_upload(m.filename)
    db.session.delete(m)
    db.session.commit()
    return jsonify({"success": True, "message": "Media removed"}), 200


@api_media.post("/<int:media_id>/like")
def like_media(media_id: int):
    m = db.session.get(Media, media_id)
    if not m:
        return jsonify({"message": "Media not found"}), 404
    m.likes = (m.likes or 0) + 1
    db.session.commit()
    return jsonify({"success": True, "likes": m.likes}), 200
