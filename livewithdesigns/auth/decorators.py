from functools import wraps

from flask import jsonify
from flask_login import current_user, login_required


def admin_required(view):
    """Bearer-authenticated admins only: 401 without a valid token, 403 for other roles."""

    @wraps(view)
    @login_required
    def wrapped(*args, **kwargs):
        if not current_user.is_admin:
            return jsonify({"message": "Not authorized as an admin"}), 403
        return view(*args, **kwargs)

    return wrapped
