from flask import Blueprint, jsonify

from livewithdesigns.models import SiteSettings

api_settings = Blueprint("api_settings", __name__, url_prefix="/api/settings")


@api_settings.get("/home-banner")
def get_home_banner():
    settings = SiteSettings.get_settings("main")
    return jsonify({"success": True, "data": settings.banner()}), 200
