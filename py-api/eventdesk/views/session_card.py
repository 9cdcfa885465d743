"""Server-rendered card for a conference session and its feedback state."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from flask import render_template

TEMPLATE = "session_card.html"


def _text(session: Mapping[str, Any], key: str) -> str:
    value = session.get(key)
    return "" if value is None else str(value)


def session_card_context(session: Mapping[str, Any], has_feedback: bool, is_event_started: bool = True) -> Dict[str, Any]:
    """Build the values the card template displays."""
    return {
        "session_id": _text(session, "_id") or _text(session, "id"),
        "title": _text(session, "title"),
        "track": _text(session, "track"),
        "details": [
            ("Speaker", _text(session, "speaker")),
            ("Time", _text(session, "time")),
            ("Room", _text(session, "room")),
        ],
        "has_feedback": bool(has_feedback),
        "button_class": "btn-primary" if is_event_started else "btn-disabled",
        "button_disabled": not is_event_started,
    }


def render_session_card(session: Mapping[str, Any], has_feedback: bool, is_event_started: bool = True) -> str:
    """Render the card as HTML. Requires an application context."""
    return render_template(TEMPLATE, card=session_card_context(session, has_feedback, is_event_started))
