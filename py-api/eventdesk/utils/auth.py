"""Authentication helpers for session and token management."""

from __future__ import annotations

import os
import secrets
import time
from typing import Any, Dict, Optional, Set, Tuple

from flask import Flask, jsonify, request

from eventdesk.services import auth_service

# Session expiry window (seconds).
SESSION_TTL_SECONDS = 24 * 60 * 60

ROLE_ADMIN = "admin"
ROLE_ATTENDEE = "attendee"


def now_seconds() -> int:
    """Return the current UNIX timestamp in seconds."""
    return int(time.time())


def generate_token(prefix: str = "sess") -> str:
    """Return a random token with the given prefix."""
    return f"{prefix}_{secrets.token_urlsafe(24)}"


def admin_emails() -> Set[str]:
    """Emails granted the admin role, from the comma separated ``ADMIN_EMAILS``."""
    raw = os.getenv("ADMIN_EMAILS", "")
    return {email.strip().lower() for email in raw.split(",") if email.strip()}


def role_for(email: str) -> str:
    return ROLE_ADMIN if email.strip().lower() in admin_emails() else ROLE_ATTENDEE


def require_session() -> Tuple[Optional[Dict[str, Any]], Optional[Any]]:
    """Validate the Bearer token from the request and return the associated session."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None, (jsonify(message="Missing authorization token."), 401)

    token = auth_header[7:].strip()
    session = auth_service.get_session(token)

    if not session:
        return None, (jsonify(message="Invalid or expired session."), 401)

    if session["expires_at"] <= now_seconds():
        auth_service.delete_session(token)
        return None, (jsonify(message="Session expired."), 401)

    return session, None


def require_admin() -> Tuple[Optional[Dict[str, Any]], Optional[Any]]:
    """Like :func:`require_session` but rejects non-admin sessions with 403."""
    session, error_response = require_session()
    if error_response is not None:
        return None, error_response

    if session.get("role") != ROLE_ADMIN:
        return None, (jsonify(message="Admin access required."), 403)

    return session, None


def register_session_cleanup(app: Flask) -> None:
    """Attach a before-request handler that removes expired sessions."""

    @app.before_request
    def _cleanup_sessions() -> None:
        auth_service.cleanup_expired_sessions()
