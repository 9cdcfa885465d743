"""Service for conference sessions and attendee feedback stored in MongoDB."""

from __future__ import annotations

import os
from datetime import datetime
from typing import Any, Dict, Optional

from eventdesk import database
from eventdesk.services.job_service import parse_object_id, serialize

SESSIONS_COLLECTION = "conference_sessions"
FEEDBACK_COLLECTION = "session_feedback"


def get_conference_session(session_id: str) -> Optional[Dict[str, Any]]:
    """Return a conference session by id, or None for unknown or malformed ids."""
    object_id = parse_object_id(session_id)
    if object_id is None:
        return None
    return serialize(database.get_database()[SESSIONS_COLLECTION].find_one({"_id": object_id}))


def has_feedback(user_email: str, session_id: str) -> bool:
    """Whether the attendee already left feedback for the session."""
    collection = database.get_database()[FEEDBACK_COLLECTION]
    return collection.find_one({"userEmail": user_email, "sessionId": session_id}) is not None


def event_started(now: Optional[datetime] = None) -> bool:
    """
    Compare the current UTC time with ``EVENT_STARTS_AT``.

    An unset start time means the event is running.
    """
    starts_at = os.getenv("EVENT_STARTS_AT")
    if not starts_at:
        return True
    return (now or datetime.utcnow()) >= datetime.fromisoformat(starts_at)
