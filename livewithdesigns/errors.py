# livewithdesigns/errors.py
from flask import jsonify
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from livewithdesigns.extensions import db


class ValidationError(ValueError):
    """Raised by model validators; answered with HTTP 400."""


def register_error_handlers(app):
    @app.errorhandler(ValidationError)
    def _validation_error(e):
        db.session.rollback()
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(IntegrityError)
    def _integrity_error(e):
        db.session.rollback()
        app.logger.warning("Integrity error: %s", e.orig)
        return jsonify({"success": False, "message": "Duplicate or conflicting value"}), 400

    @app.errorhandler(HTTPException)
    def _http_error(e):
        return jsonify({"success": False, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def _unhandled(e):
        db.session.rollback()
        app.logger.exception("Unhandled error")
        return jsonify({"success": False, "message": str(e) or "Something went wrong!"}), 500
