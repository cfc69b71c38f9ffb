from livewithdesigns.extensions import db
from .base import TimestampMixin

DEFAULT_HOME_BANNER = {
    "mediaUrl": "/elegant-living-room.png",
    "mediaType": "image",
    "mediaPublicId": "",
    "title": "Exceptional House Design & Interior Solutions",
    "subtitle": (
        "Discover premium interior design products and services that bring elegance "
        "and functionality to every corner of your home. From design consultations "
        "to full home transformations."
    ),
    "primaryButtonText": "Shop Now",
    "primaryButtonLink": "/store",
    "secondaryButtonText": "Our Services",
    "secondaryButtonLink": "/services",
}


class SiteSettings(TimestampMixin, db.Model):
    __tablename__ = "site_settings"

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(50), unique=True, nullable=False)
    home_banner = db.Column(db.JSON, nullable=False, default=lambda: dict(DEFAULT_HOME_BANNER))
    updated_by = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="SET NULL"), nullable=True)

    @classmethod
    def get_settings(cls, key: str = "main") -> "SiteSettings":
        """Fetch the settings row, creating it with defaults on first use."""
        settings = cls.query.filter_by(key=key).first()
        if not settings:
            settings = cls(key=key, home_banner=dict(DEFAULT_HOME_BANNER))
            db.session.add(settings)
            db.session.commit()
        return settings

    def banner(self) -> dict:
        return {**DEFAULT_HOME_BANNER, **(self.home_banner or {})}
