"""Service for attendee login sessions stored in MongoDB."""

from __future__ import annotations

import time
from datetime import datetime
from typing import Any, Dict, Optional

from eventdesk import database


def save_session(
    token: str,
    email: str,
    expires_at: int,
    role: str = "attendee",
    name: Optional[str] = None,
    booking_id: Optional[str] = None,
) -> str:
    """
    Save a session to MongoDB.

    Args:
        token: The session token
        email: Normalized email of the signed-in attendee
        expires_at: Unix timestamp when the session expires
        role: ``"attendee"`` or ``"admin"``
        name: Attendee name from the whitelist
        booking_id: Booking ID used to sign in

    Returns:
        The token that was saved
    """
    db = database.get_database()
    collection = db.sessions

    document = {
        "token": token,
        "email": email,
        "name": name,
        "bookingId": booking_id,
        "role": role,
        "expires_at": expires_at,
        "created_at": datetime.utcnow(),
    }

    # Upsert: update if token exists, insert if not
    collection.update_one(
        {"token": token},
        {"$set": document},
        upsert=True
    )

    return token


def get_session(token: str) -> Optional[Dict[str, Any]]:
    """
    Retrieve a session from MongoDB.

    Args:
        token: The session token

    Returns:
        The session document if found, None otherwise
    """
    db = database.get_database()
    document = db.sessions.find_one({"token": token})

    if document:
        # Convert ObjectId to string
        document["_id"] = str(document["_id"])

    return document


def delete_session(token: str) -> bool:
    """
    Delete a session from MongoDB.

    Returns:
        True if the session was deleted, False if not found
    """
    db = database.get_database()
    result = db.sessions.delete_one({"token": token})
    return result.deleted_count > 0


def cleanup_expired_sessions() -> int:
    """Remove expired sessions and return how many were deleted."""
    db = database.get_database()
    result = db.sessions.delete_many({"expires_at": {"$lte": int(time.time())}})
    return result.deleted_count


def create_indexes() -> None:
    database.get_database().sessions.create_index("token", unique=True)
