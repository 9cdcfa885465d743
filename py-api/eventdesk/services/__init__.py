"""Service layer modules for the EventDesk API."""

from . import agenda_service, application_service, auth_service, job_service, resume_service, whitelist_service

__all__ = [
    "agenda_service",
    "application_service",
    "auth_service",
    "job_service",
    "resume_service",
    "whitelist_service",
]
