"""/api/sessions routes rendering conference session cards."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from pymongo.errors import PyMongoError

from eventdesk.services import agenda_service
from eventdesk.utils.auth import require_session
from eventdesk.views.session_card import render_session_card

bp = Blueprint("sessions", __name__, url_prefix="/api/sessions")


@bp.get("/<session_id>/card")
def session_card(session_id: str):
    """Render the feedback card of a session for the signed-in attendee."""
    user, error_response = require_session()
    if error_response is not None:
        return error_response

    try:
        conference_session = agenda_service.get_conference_session(session_id)
        if conference_session is None:
            return jsonify(message="Session not found"), 404
        feedback_given = agenda_service.has_feedback(user["email"], session_id)
    except PyMongoError:
        current_app.logger.exception("Failed to load session card")
        return jsonify(message="Failed to load session"), 500

    html = render_session_card(conference_session, feedback_given, agenda_service.event_started())
    return html, 200, {"Content-Type": "text/html; charset=utf-8"}
