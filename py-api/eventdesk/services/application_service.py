"""Service for job applications stored in MongoDB."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from eventdesk import database
from eventdesk.errors import DuplicateApplicationError
from eventdesk.services.job_service import serialize
from eventdesk.storage import StoredObject

_LOGGER = logging.getLogger(__name__)

COLLECTION = "job_applications"
UNIQUE_INDEX_NAME = "one_application_per_user_and_job"


def _get_collection() -> Collection:
    return database.get_database()[COLLECTION]


def create_indexes(db: Optional[Database] = None) -> None:
    """Create the unique (userEmail, jobId) index backing de-duplication."""
    db = db if db is not None else database.get_database()
    db[COLLECTION].create_index(
        [("userEmail", ASCENDING), ("jobId", ASCENDING)],
        unique=True,
        name=UNIQUE_INDEX_NAME,
    )


def has_applied(user_email: str, job_id: str) -> bool:
    return _get_collection().find_one({"userEmail": user_email, "jobId": job_id}) is not None


def submit_application(
    user_email: str,
    job_id: str,
    job_title: Optional[str] = None,
    company: Optional[str] = None,
    name: Optional[str] = None,
    phone: Optional[str] = None,
    cover_letter: Optional[str] = None,
    resume: Optional[StoredObject] = None,
    check_existing: bool = True,
) -> Dict[str, Any]:
    """
    Create a job application unless the user already applied for the job.

    The lookup only gives early feedback. Concurrent submissions are caught
    by the unique index and reported the same way.

    Args:
        user_email: Email of the applying attendee
        job_id: Identifier of the job
        job_title: Job title copied onto the application
        company: Company copied onto the application
        name: Applicant name
        phone: Applicant phone number
        cover_letter: Optional cover letter text
        resume: Uploaded resume, if one was attached
        check_existing: Run the lookup first; callers that already did can skip it

    Returns:
        The stored application document

    Raises:
        DuplicateApplicationError: If an application for the pair exists
    """
    if check_existing and has_applied(user_email, job_id):
        raise DuplicateApplicationError(user_email, job_id)

    application = {
        "userEmail": user_email,
        "jobId": job_id,
        "jobTitle": job_title,
        "company": company,
        "name": name,
        "phone": phone,
        "resumeFile": resume.key if resume else None,
        "resumeUrl": resume.url if resume else None,
        "coverLetter": cover_letter,
        "createdAt": datetime.utcnow(),
    }

    try:
        result = _get_collection().insert_one(application)
    except DuplicateKeyError as exc:
        _LOGGER.info("Concurrent duplicate application for %s on job %s", user_email, job_id)
        raise DuplicateApplicationError(user_email, job_id) from exc

    application["_id"] = str(result.inserted_id)
    return application


def list_applications(newest_first: bool = True) -> List[Dict[str, Any]]:
    """Return all applications, newest first by default."""
    cursor = _get_collection().find()
    if newest_first:
        cursor = cursor.sort("createdAt", -1)
    return [serialize(application) for application in cursor]


def count_applications(user_email: str, job_id: str) -> int:
    return _get_collection().count_documents({"userEmail": user_email, "jobId": job_id})
