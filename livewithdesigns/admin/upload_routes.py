import os

from flask import request, jsonify, current_app

from . import admin_bp
from livewithdesigns.auth.decorators import admin_required
from livewithdesigns.api.utils.uploads import (
    check_upload, process_and_save_image, save_raw, upload_url, file_size,
)

MAX_FILES = 10


def _format(name: str) -> str:
    return os.path.splitext(name)[1].lstrip(".").lower()


@admin_bp.post("/upload")
@admin_required
def upload_image():
    fs = request.files.get("image")
    if not fs or not fs.filename:
        return jsonify({"message": "No file uploaded"}), 400

    check_upload(fs, "image")
    name = process_and_save_image(fs)
    current_app.logger.info("[UPLOAD] image %s -> %s", fs.filename, name)
    return jsonify({"success": True, "url": upload_url(name), "publicId": name}), 200


@admin_bp.post("/upload-multiple")
@admin_required
def upload_images():
    files = [fs for fs in request.files.getlist("images") if fs and fs.filename]
    if not files:
        return jsonify({"message": "No files uploaded"}), 400
    if len(files) > MAX_FILES:
        return jsonify({"message": f"You can upload at most {MAX_FILES} images at once"}), 400

    # validate everything before anything is written
    for fs in files:
        check_upload(fs, "image")
    names = [process_and_save_image(fs) for fs in files]
    current_app.logger.info("[UPLOAD] %s images stored", len(names))
    return jsonify({
        "success": True,
        "images": [{"url": upload_url(n), "publicId": n} for n in names],
    }), 200


@admin_bp.post("/upload-video")
@admin_required
def upload_video():
    fs = request.files.get("video")
    if not fs or not fs.filename:
        return jsonify({"message": "No video file uploaded"}), 400

    check_upload(fs, "video")
    name = save_raw(fs)
    current_app.logger.info("[UPLOAD] video %s -> %s", fs.filename, name)
    return jsonify({
        "success": True,
        "url": upload_url(name),
        "publicId": name,
        "format": _format(name),
    }), 200


@admin_bp.post("/upload-3d")
@admin_required
def upload_model():
    fs = request.files.get("model")
    if not fs or not fs.filename:
        return jsonify({"message": "No 3D model file uploaded"}), 400

    check_upload(fs, "model")
    size = file_size(fs)
    name = save_raw(fs)
    current_app.logger.info("[UPLOAD] 3D model %s -> %s (%s bytes)", fs.filename, name, size)
    return jsonify({
        "success": True,
        "url": upload_url(name),
        "publicId": name,
        "format": _format(name),
        "size": size,
    }), 200
