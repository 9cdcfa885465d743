"""Flask application setup and blueprint wiring."""

from __future__ import annotations

import os

from flask import Flask
from flask_cors import CORS
from pymongo.errors import PyMongoError

from eventdesk.routes import register_routes
from eventdesk.utils.auth import register_session_cleanup

UPLOAD_LIMIT_BYTES = 10 * 1024 * 1024  # 10 MB per request


def create_indexes() -> None:
    """Create the MongoDB indexes every service relies on."""
    from eventdesk.services import application_service, auth_service, whitelist_service

    application_service.create_indexes()
    auth_service.create_indexes()
    whitelist_service.create_indexes()


def create_app() -> Flask:
    """Configure and return the Flask application instance."""
    app = Flask(__name__)
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    app.config["MAX_CONTENT_LENGTH"] = UPLOAD_LIMIT_BYTES
    app.config["UPLOAD_DIR"] = os.getenv("UPLOAD_DIR", os.path.join("uploads", "tmp"))

    register_session_cleanup(app)
    register_routes(app)

    try:
        create_indexes()
        app.logger.info("MongoDB indexes created successfully")
    except PyMongoError as e:
        app.logger.warning(f"Failed to create MongoDB indexes: {e}")

    return app
