# livewithdesigns/app.py
import logging
import os

# Show INFO logs even outside the werkzeug access log
logging.basicConfig(level=logging.INFO)

from flask import Flask, jsonify, send_from_directory
from livewithdesigns.config import Config

# Extensions
from livewithdesigns.extensions import db, login_manager, bcrypt, migrate, cors, init_mail
from livewithdesigns.errors import register_error_handlers
from livewithdesigns.cli import register_cli

# Blueprints
from livewithdesigns.admin import admin_bp
from livewithdesigns.auth import auth_bp
from livewithdesigns.api.routes.product_routes import api_products
from livewithdesigns.api.routes.project_routes import api_projects
from livewithdesigns.api.routes.category_routes import api_categories
from livewithdesigns.api.routes.blog_routes import api_blog
from livewithdesigns.api.routes.service_routes import api_services
from livewithdesigns.api.routes.review_routes import api_reviews
from livewithdesigns.api.routes.media_routes import api_media
from livewithdesigns.api.routes.cart_routes import api_cart
from livewithdesigns.api.routes.wishlist_routes import api_wishlist
from livewithdesigns.api.routes.address_routes import api_addresses
from livewithdesigns.api.routes.order_routes import order_bp
from livewithdesigns.api.routes.payment_routes import payment_bp
from livewithdesigns.api.routes.contact_routes import api_contact
from livewithdesigns.api.routes.settings_routes import api_settings
from livewithdesigns import models as _models  # noqa: F401

BLUEPRINTS = (
    auth_bp,
    admin_bp,
    api_products,
    api_projects,
    api_categories,
    api_blog,
    api_services,
    api_reviews,
    api_media,
    api_cart,
    api_wishlist,
    api_addresses,
    order_bp,
    payment_bp,
    api_contact,
    api_settings,
)


def create_app(config_object=Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_object)
    # "/api/products" and "/api/products/" are the same resource
    app.url_map.strict_slashes = False

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    bcrypt.init_app(app)
    init_mail(app)

    cors.init_app(
        app,
        resources={
            r"/api/*": {
                "origins": app.config["CORS_ORIGINS"],
                "supports_credentials": True,
            }
        },
    )

    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    for bp in BLUEPRINTS:
        app.register_blueprint(bp)

    register_error_handlers(app)
    register_cli(app)

    @app.get("/uploads/<path:name>")
    def uploaded_file(name):
        return send_from_directory(app.config["UPLOAD_FOLDER"], name)

    @app.get("/")
    def index():
        return jsonify({"message": "Welcome to Live With Designs API!"})

    return app
