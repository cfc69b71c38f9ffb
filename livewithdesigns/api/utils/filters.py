from __future__ import annotations

import json

from flask import request
from sqlalchemy import or_, cast, String

from livewithdesigns.errors import ValidationError

TRUE_VALUES = ("1", "true", "t", "yes", "y", "on")


def get_payload() -> dict:
    """JSON body, or the multipart/urlencoded form as a plain dict."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict() if request.form else {}


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_filter(term: str | None, *columns):
    """Case-insensitive substring match OR-ed across `columns`; None for an empty term."""
    term = (term or "").strip()
    if not term:
        return None
    pattern = f"%{escape_like(term)}%"
    return or_(*[cast(col, String).ilike(pattern, escape="\\") for col in columns])


def contains(column, term: str):
    return column.ilike(f"%{escape_like(term)}%", escape="\\")


def float_arg(name: str):
    raw = request.args.get(name)
    if raw in (None, ""):
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def int_value(val, default=None):
    try:
        return int(val)
    except (TypeError, ValueError):
        return default


def quantity_value(val, default: int) -> int:
    """Whole-number quantity. `default` covers a missing value; anything unparsable is rejected."""
    if val is None or val == "":
        return default
    if isinstance(val, bool) or (isinstance(val, float) and not val.is_integer()):
        raise ValidationError("Invalid quantity")
    try:
        return int(val)
    except (TypeError, ValueError):
        raise ValidationError("Invalid quantity")


def float_value(val, default=None):
    if val in (None, ""):
        return default
    try:
        return float(val)
    except (TypeError, ValueError):
        return default


def to_bool(val, default: bool = False) -> bool:
    if val is None or val == "":
        return default
    if isinstance(val, bool):
        return val
    return str(val).strip().lower() in TRUE_VALUES


def bool_arg(name: str) -> bool:
    return to_bool(request.args.get(name))


def parse_json_field(value, default=None):
    """Multipart forms carry nested values as JSON strings; decode those, pass the rest through."""
    if value is None or value == "":
        return default
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return default
    return value


def parse_list(value) -> list:
    """A list from a JSON list, a JSON string, or a comma-separated string."""
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        parsed = parse_json_field(value)
        if isinstance(parsed, list):
            return parsed
        return [part.strip() for part in value.split(",") if part.strip()]
    return [value]
