# livewithdesigns/auth/__init__.py

# One blueprint object shared by every auth module
from . import login_routes as _login

auth_bp = _login.auth_bp

# Importing attaches the views to auth_bp
from . import password_reset_routes  # noqa: F401,E402
