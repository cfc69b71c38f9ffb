from __future__ import annotations

import re
import unicodedata


def slugify(val: str | None, fallback: str = "item") -> str:
    raw = (val or "").strip().lower()
    if not raw:
        return fallback
    normalized = unicodedata.normalize("NFKD", raw)
    normalized = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    normalized = re.sub(r"[^a-z0-9]+", "-", normalized).strip("-")
    return normalized or fallback


def unique_slug(model, base: str, exclude_id: int | None = None) -> str:
    """First free `base`, `base-2`, `base-3`... in `model.slug`."""
    slug = base or "item"
    candidate = slug
    suffix = 1
    while True:
        q = model.query.filter(model.slug == candidate)
        if exclude_id:
            q = q.filter(model.id != exclude_id)
        if not q.first():
            return candidate
        suffix += 1
        candidate = f"{slug}-{suffix}"
