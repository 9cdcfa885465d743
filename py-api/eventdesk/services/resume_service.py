"""Service for uploaded resumes stored in MongoDB."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from eventdesk import database
from eventdesk.services.job_service import parse_object_id, serialize
from eventdesk.storage import StoredObject

COLLECTION = "resumes"


def save_resume(
    user_email: str,
    stored: StoredObject,
    name: Optional[str] = None,
    phone: Optional[str] = None,
    experience: Optional[str] = None,
    skills: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Record a resume that has already been uploaded to object storage.

    Args:
        user_email: Email of the uploading attendee
        stored: Location of the uploaded file
        name: Applicant name
        phone: Applicant phone number
        experience: Free-text experience summary
        skills: Free-text skills list

    Returns:
        The stored resume document
    """
    resume = {
        "userEmail": user_email,
        "name": name,
        "phone": phone,
        "experience": experience,
        "skills": skills,
        "filename": stored.filename,
        "storageUrl": stored.url,
        "storageKey": stored.key,
        "originalName": stored.original_name,
        "createdAt": datetime.utcnow(),
    }
    result = database.get_database()[COLLECTION].insert_one(resume)
    resume["_id"] = str(result.inserted_id)
    return resume


def list_resumes() -> List[Dict[str, Any]]:
    """Return all resumes, newest first."""
    collection = database.get_database()[COLLECTION]
    return [serialize(resume) for resume in collection.find().sort("createdAt", -1)]


def get_resume(resume_id: str) -> Optional[Dict[str, Any]]:
    """Return a resume by id, or None for unknown or malformed ids."""
    object_id = parse_object_id(resume_id)
    if object_id is None:
        return None
    return serialize(database.get_database()[COLLECTION].find_one({"_id": object_id}))
