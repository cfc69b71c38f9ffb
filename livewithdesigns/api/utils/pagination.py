from __future__ import annotations

from math import ceil

from flask import request

MAX_LIMIT = 100


def _to_int(val, default: int) -> int:
    try:
        return int(val)
    except (TypeError, ValueError):
        return default


def page_args(default_limit: int = 12) -> tuple[int, int]:
    """Read `page` and `limit` from the query string. Page floors at 1, limit is clamped to 1..100."""
    page = max(_to_int(request.args.get("page"), 1), 1)
    limit = _to_int(request.args.get("limit"), default_limit)
    limit = min(max(limit, 1), MAX_LIMIT)
    return page, limit


def pagination_dict(page: int, limit: int, total: int, noun: str = "Items") -> dict:
    total_pages = ceil(total / limit) if limit else 0
    return {
        "currentPage": page,
        "totalPages": total_pages,
        f"total{noun}": total,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }


def paginate(query, page: int, limit: int, noun: str = "Items"):
    """Run `query` for one page. Returns (items, pagination dict)."""
    total = query.order_by(None).count()
    items = query.limit(limit).offset((page - 1) * limit).all()
    return items, pagination_dict(page, limit, total, noun)
