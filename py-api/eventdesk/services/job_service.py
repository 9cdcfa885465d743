"""Service for job postings stored in MongoDB."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from bson import ObjectId
from bson.errors import InvalidId

from eventdesk import database
from eventdesk.utils.csv_rows import CsvField, normalize_rows, open_csv

_LOGGER = logging.getLogger(__name__)

COLLECTION = "jobs"

JOB_TEXT_FIELDS = ("title", "company", "location", "experience", "skills", "description")

JOB_CSV_FIELDS = (
    CsvField("title", ("Title", "Job Title", "job_title"), default=""),
    CsvField("company", ("Company", "Company Name", "company_name"), default=""),
    CsvField("location", ("Location",), default=""),
    CsvField("experience", ("Experience",), default=""),
    CsvField("skills", ("Skills",), default=""),
    CsvField("description", ("Description", "Job Description"), default=""),
)


def serialize(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Convert the ObjectId of a stored document into a string in place."""
    if document is not None and "_id" in document:
        document["_id"] = str(document["_id"])
    return document


def parse_object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def build_job(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a job document with every text field present."""
    job = {field: str(data.get(field) or "").strip() for field in JOB_TEXT_FIELDS}
    job["createdAt"] = datetime.utcnow()
    return job


def create_job(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Insert a single job posting.

    Args:
        data: Submitted job fields; title and company are required

    Returns:
        The stored job document

    Raises:
        ValueError: If title or company is missing
    """
    job = build_job(data)
    if not job["title"] or not job["company"]:
        raise ValueError("Job title and company are required")

    collection = database.get_database()[COLLECTION]
    result = collection.insert_one(job)
    job["_id"] = str(result.inserted_id)
    return job


def list_jobs() -> List[Dict[str, Any]]:
    """Return all jobs, newest first."""
    collection = database.get_database()[COLLECTION]
    return [serialize(job) for job in collection.find().sort("createdAt", -1)]


def read_jobs(stream: Iterable[str]):
    """Yield job records from CSV, silently skipping rows without title or company."""
    return normalize_rows(stream, JOB_CSV_FIELDS, required=("title", "company"), strict=True)


def insert_jobs(jobs: List[Dict[str, Any]]) -> int:
    """Insert parsed jobs in one batch and return how many were stored."""
    if not jobs:
        return 0
    created_at = datetime.utcnow()
    documents = [{**job, "createdAt": created_at} for job in jobs]
    database.get_database()[COLLECTION].insert_many(documents)
    _LOGGER.info("Inserted %d jobs from CSV", len(documents))
    return len(documents)


def parse_jobs_file(path: str) -> List[Dict[str, Any]]:
    """Read every valid job from a CSV file on disk."""
    with open_csv(path) as stream:
        return list(read_jobs(stream))
