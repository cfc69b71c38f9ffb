from flask import Blueprint

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")

# Importing attaches the views to admin_bp
from . import routes            # dashboard, users, orders, content views  # noqa: E402,F401
from . import category_routes   # categories  # noqa: E402,F401
from . import upload_routes     # uploads  # noqa: E402,F401
from . import settings_routes   # home banner  # noqa: E402,F401
