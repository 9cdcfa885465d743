"""Exceptions raised by the service layer and translated by the routes."""

from __future__ import annotations


class EventDeskError(Exception):
    """Base class for application errors."""


class CsvImportError(EventDeskError):
    """The uploaded or imported CSV could not be parsed."""


class DuplicateApplicationError(EventDeskError):
    """The user already applied for the job."""

    message = "You have already applied for this job"

    def __init__(self, user_email: str, job_id: str):
        super().__init__(self.message)
        self.user_email = user_email
        self.job_id = job_id


class StorageError(EventDeskError):
    """Object storage is misconfigured or rejected an upload."""
