"""/api/auth routes letting whitelisted attendees sign in."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from pymongo.errors import PyMongoError

from eventdesk.services import auth_service, whitelist_service
from eventdesk.utils.auth import (
    SESSION_TTL_SECONDS,
    generate_token,
    now_seconds,
    require_session,
    role_for,
)

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.post("/login")
def login():
    """Exchange a whitelisted email and booking ID for a session token."""
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify(message="Expected a JSON object"), 400

    email = str(payload.get("email") or "").strip().lower()
    booking_id = str(payload.get("bookingId") or "").strip()

    if not email or not booking_id:
        return jsonify(message="Email and booking ID are required."), 400

    try:
        entry = whitelist_service.find_entry(email, booking_id)
        if entry is None:
            return jsonify(message="You are not registered for this event."), 401

        token = generate_token("sess")
        expires_at = now_seconds() + SESSION_TTL_SECONDS
        role = role_for(email)
        auth_service.save_session(
            token,
            email,
            expires_at,
            role=role,
            name=entry.get("name"),
            booking_id=booking_id,
        )
    except PyMongoError as e:
        current_app.logger.error(f"Failed to sign in {email}: {e}")
        return jsonify(message="Login failed"), 500

    return (
        jsonify(
            token=token,
            email=email,
            name=entry.get("name"),
            role=role,
            expiresAt=expires_at * 1000,
        ),
        200,
    )


@bp.get("/me")
def me():
    """Return the current session."""
    session, error_response = require_session()
    if error_response is not None:
        return error_response

    return (
        jsonify(
            email=session["email"],
            name=session.get("name"),
            role=session.get("role"),
            expiresAt=session["expires_at"] * 1000,
        ),
        200,
    )


@bp.post("/logout")
def logout():
    """Delete the current session."""
    session, error_response = require_session()
    if error_response is not None:
        return error_response

    auth_service.delete_session(session["token"])
    return jsonify(success=True), 200
