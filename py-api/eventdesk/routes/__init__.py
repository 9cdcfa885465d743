"""Blueprint registration helper."""

from __future__ import annotations

from flask import Flask, jsonify

from .auth import bp as auth_bp
from .jobs import bp as jobs_bp
from .sessions import bp as sessions_bp


def register_routes(app: Flask) -> None:
    """Register all application blueprints on the provided Flask app."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(jobs_bp)
    app.register_blueprint(sessions_bp)

    @app.get("/")
    def index():
        return jsonify(message="Hello from EventDesk API"), 200
