"""Local media storage.

Files live under ``UPLOAD_FOLDER`` and are served from ``/uploads/<name>``.
The stored file name doubles as the public id used to remove the file later.
"""
from __future__ import annotations

import os
import uuid

from flask import current_app
from PIL import Image, ImageOps, UnidentifiedImageError

from livewithdesigns.errors import ValidationError

MB = 1024 * 1024

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".tif", ".tiff", ".heic", ".heif"}
VIDEO_EXTENSIONS = {".mp4", ".mov", ".avi", ".mkv", ".webm", ".m4v"}
MODEL_EXTENSIONS = {".glb", ".gltf", ".obj", ".fbx", ".dae"}

IMAGE_MAX_BYTES = 5 * MB
VIDEO_MAX_BYTES = 100 * MB
MODEL_MAX_BYTES = 50 * MB

MAX_IMAGE_SIDE = 1600


def _ext(filename: str | None) -> str:
    return os.path.splitext(filename or "")[1].lower()


def detect_media_type(filename: str, mimetype: str | None) -> str:
    """Return 'video' or 'image'."""
    mt = (mimetype or "").lower()
    if mt.startswith("video/"):
        return "video"
    if mt.startswith("image/"):
        return "image"
    if _ext(filename) in VIDEO_EXTENSIONS:
        return "video"
    return "image"


def uploads_dir() -> str:
    d = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(d, exist_ok=True)
    return d


def upload_url(name: str | None) -> str | None:
    return f"/uploads/{name}" if name else None


def public_id_from_url(url: str | None) -> str | None:
    """Stored file name behind a `/uploads/<name>` URL; None for foreign URLs."""
    if not url or not url.startswith("/uploads/"):
        return None
    return os.path.basename(url)


def _safe_uuid_name(ext: str = ".webp") -> str:
    return f"{uuid.uuid4().hex}{ext.lower()}"


def file_size(fs) -> int:
    stream = fs.stream
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(pos)
    return size


def check_upload(fs, kind: str) -> None:
    """Reject files whose type or size does not fit the upload `kind` (image, video, model)."""
    ext = _ext(fs.filename)
    mt = (fs.mimetype or "").lower()
    if kind == "image":
        ok = mt.startswith("image/") or ext in IMAGE_EXTENSIONS
        limit, label = IMAGE_MAX_BYTES, "Only image files are allowed"
    elif kind == "video":
        ok = mt.startswith("video/") or ext in VIDEO_EXTENSIONS
        limit, label = VIDEO_MAX_BYTES, "Only video files are allowed"
    elif kind == "model":
        ok = ext in MODEL_EXTENSIONS
        limit, label = MODEL_MAX_BYTES, "Only 3D model files (.glb, .gltf, .obj, .fbx, .dae) are allowed"
    else:
        ok = (
            mt.startswith("image/") or mt.startswith("video/")
            or ext in IMAGE_EXTENSIONS or ext in VIDEO_EXTENSIONS
        )
        limit, label = VIDEO_MAX_BYTES, "Only image or video files are allowed"
    if not ok:
        raise ValidationError(label)
    if file_size(fs) > limit:
        raise ValidationError(f"File too large (max {limit // MB} MB)")


def save_raw(fs) -> str:
    """Store the upload unchanged under a random name; returns the stored name."""
    ext = _ext(fs.filename) or ".bin"
    name = _safe_uuid_name(ext)
    fs.stream.seek(0)
    fs.save(os.path.join(uploads_dir(), name))
    return name


def process_and_save_image(fs) -> str:
    """
    Normalize an uploaded image:
    - apply EXIF orientation
    - convert to RGB (transparency flattened onto white)
    - shrink the longest side to 1600 px
    - store as WebP, quality 85
    Files Pillow cannot decode are stored unchanged.
    """
    try:
        img = Image.open(fs.stream)
        img = ImageOps.exif_transpose(img)
        if img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGBA" if "transparency" in img.info else "RGB")
        img.thumbnail((MAX_IMAGE_SIDE, MAX_IMAGE_SIDE), Image.Resampling.LANCZOS)

        if img.mode == "RGBA":
            bg = Image.new("RGB", img.size, (255, 255, 255))
            bg.paste(img, mask=img.split()[-1])
            img = bg

        out_name = _safe_uuid_name(".webp")
        img.save(os.path.join(uploads_dir(), out_name), format="WEBP", quality=85, method=6)
        return out_name
    except (UnidentifiedImageError, OSError):
        current_app.logger.info("Pillow could not decode %r, storing it as-is", fs.filename)
        return save_raw(fs)


def save_media(fs) -> tuple[str, str]:
    """Store an image or a video; returns (stored name, media type)."""
    media_type = detect_media_type(fs.filename or "", fs.mimetype)
    if media_type == "image":
        return process_and_save_image(fs), media_type
    return save_raw(fs), media_type


def delete_upload(name: str | None) -> bool:
    """Remove a stored file; failures are logged, never raised."""
    if not name:
        return False
    path = os.path.join(uploads_dir(), os.path.basename(name))
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        return False
    except OSError:
        current_app.logger.exception("Could not delete upload %s", name)
        return False


def delete_upload_url(url: str | None) -> bool:
    return delete_upload(public_id_from_url(url))
