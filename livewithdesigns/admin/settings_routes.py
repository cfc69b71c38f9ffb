from flask import request, jsonify, current_app
from flask_login import current_user

from . import admin_bp
from livewithdesigns.extensions import db
from livewithdesigns.models import SiteSettings
from livewithdesigns.auth.decorators import admin_required
from livewithdesigns.api.utils.filters import get_payload
from livewithdesigns.api.utils.uploads import check_upload, save_media, upload_url, delete_upload

BANNER_TEXT_FIELDS = (
    "title",
    "subtitle",
    "mediaType",
    "primaryButtonText",
    "primaryButtonLink",
    "secondaryButtonText",
    "secondaryButtonLink",
)


@admin_bp.get("/settings/home-banner")
@admin_required
def get_home_banner():
    settings = SiteSettings.get_settings("main")
    return jsonify({"success": True, "data": settings.banner()}), 200


@admin_bp.put("/settings/home-banner")
@admin_required
def update_home_banner():
    settings = SiteSettings.get_settings("main")
    data = get_payload()
    banner = settings.banner()

    for key in BANNER_TEXT_FIELDS:
        if data.get(key):
            banner[key] = data.get(key)

    old_media = None
    fs = request.files.get("media")
    if fs and fs.filename:
        check_upload(fs, "media")
        name, media_type = save_media(fs)
        old_media = banner.get("mediaPublicId")
        banner.update(mediaUrl=upload_url(name), mediaPublicId=name, mediaType=media_type)

    # JSON columns only notice reassignment
    settings.home_banner = banner
    settings.updated_by = current_user.id
    db.session.commit()

    if old_media:
        delete_upload(old_media)
    current_app.logger.info("[SETTINGS] home banner updated by %s", current_user.id)
    return jsonify({
        "success": True,
        "message": "Banner updated successfully",
        "data": settings.banner(),
    }), 200
