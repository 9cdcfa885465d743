"""/api/jobs routes for the job board, resumes and applications."""

from __future__ import annotations

import os
import tempfile
from typing import Optional

from flask import Blueprint, Response, current_app, jsonify, redirect, request
from pymongo.errors import PyMongoError

from eventdesk import storage
from eventdesk.errors import CsvImportError, DuplicateApplicationError, StorageError
from eventdesk.services import application_service, job_service, resume_service
from eventdesk.storage import StoredObject
from eventdesk.utils.auth import require_admin, require_session
from eventdesk.utils.csv_export import (
    APPLICATION_COLUMNS,
    JOB_COLUMNS,
    RESUME_COLUMNS,
    export_filename,
    format_csv,
)

DEFAULT_UPLOAD_DIR = os.path.join("uploads", "tmp")

bp = Blueprint("jobs", __name__, url_prefix="/api/jobs")


@bp.errorhandler(DuplicateApplicationError)
def _duplicate_application(error: DuplicateApplicationError):
    return jsonify(message=error.message), 400


def _csv_attachment(body: str, filename: str) -> Response:
    response = Response(body, mimetype="text/csv")
    response.headers["Content-Disposition"] = f"attachment; filename={filename}"
    return response


def _upload_dir() -> str:
    path = current_app.config.get("UPLOAD_DIR") or os.getenv("UPLOAD_DIR", DEFAULT_UPLOAD_DIR)
    os.makedirs(path, exist_ok=True)
    return path


def _form_value(name: str) -> Optional[str]:
    value = request.form.get(name)
    return value.strip() if value is not None else None


def _discard_upload(stored: StoredObject) -> None:
    try:
        storage.get_object_storage().delete(stored.key)
    except StorageError:
        current_app.logger.warning(f"Could not remove orphaned upload {stored.key}", exc_info=True)


@bp.get("")
def list_jobs():
    """Return all jobs for signed-in attendees."""
    _, error_response = require_session()
    if error_response is not None:
        return error_response

    try:
        return jsonify(job_service.list_jobs()), 200
    except PyMongoError:
        current_app.logger.exception("Failed to fetch jobs")
        return jsonify(message="Failed to fetch jobs"), 500


@bp.post("")
def create_job():
    """Create a single job posting (admin only)."""
    _, error_response = require_admin()
    if error_response is not None:
        return error_response

    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify(message="Expected a JSON object"), 400

    try:
        job = job_service.create_job(payload)
    except ValueError as e:
        return jsonify(message=str(e)), 400
    except PyMongoError:
        current_app.logger.exception("Failed to create job")
        return jsonify(message="Failed to create job"), 500

    return jsonify(job), 201


@bp.post("/upload-csv")
def upload_jobs_csv():
    """Bulk-create jobs from an uploaded CSV file (admin only)."""
    _, error_response = require_admin()
    if error_response is not None:
        return error_response

    upload = request.files.get("file")
    if upload is None or upload.filename == "":
        return jsonify(message="No file uploaded"), 400

    fd, file_path = tempfile.mkstemp(suffix=".csv", dir=_upload_dir())
    os.close(fd)
    try:
        upload.save(file_path)

        try:
            new_jobs = job_service.parse_jobs_file(file_path)
        except (CsvImportError, UnicodeDecodeError) as e:
            current_app.logger.warning(f"CSV parsing failed: {e}")
            return jsonify(message="CSV parsing failed", error=str(e)), 500

        try:
            count = job_service.insert_jobs(new_jobs)
        except PyMongoError:
            current_app.logger.exception("Failed to save jobs")
            return jsonify(message="Failed to save jobs"), 500
    finally:
        if os.path.exists(file_path):
            os.remove(file_path)

    return jsonify(message=f"{count} jobs uploaded successfully", count=count), 200


@bp.post("/resumes")
def upload_resume():
    """Upload a resume to object storage and record it."""
    session, error_response = require_session()
    if error_response is not None:
        return error_response

    upload = request.files.get("resume")
    if upload is None or upload.filename == "":
        return jsonify(message="No file uploaded"), 400

    try:
        stored = storage.get_object_storage().upload(upload)
        resume = resume_service.save_resume(
            session["email"],
            stored,
            name=_form_value("name"),
            phone=_form_value("phone"),
            experience=_form_value("experience"),
            skills=_form_value("skills"),
        )
    except (StorageError, PyMongoError) as e:
        current_app.logger.exception("Resume upload error")
        return jsonify(message="Failed to upload resume", error=str(e)), 500

    return (
        jsonify(
            message="Resume uploaded successfully",
            id=resume["_id"],
            storageUrl=stored.url,
        ),
        201,
    )


@bp.post("/apply")
def apply_for_job():
    """Submit an application, optionally attaching a resume file."""
    session, error_response = require_session()
    if error_response is not None:
        return error_response

    fields = request.form if request.form else (request.get_json(silent=True) or {})
    if not isinstance(fields, dict):
        return jsonify(message="Expected a JSON object"), 400

    job_id = str(fields.get("jobId") or "").strip()
    if not job_id:
        return jsonify(message="Job ID is required"), 400

    email = session["email"]

    try:
        # Checked before the upload so duplicates never reach the bucket.
        if application_service.has_applied(email, job_id):
            raise DuplicateApplicationError(email, job_id)

        stored = None
        upload = request.files.get("resume")
        if upload is not None and upload.filename:
            stored = storage.get_object_storage().upload(upload)

        try:
            application_service.submit_application(
                email,
                job_id,
                job_title=fields.get("jobTitle"),
                company=fields.get("company"),
                name=fields.get("name"),
                phone=fields.get("phone"),
                cover_letter=fields.get("coverLetter"),
                resume=stored,
                check_existing=False,
            )
        except (DuplicateApplicationError, PyMongoError):
            if stored is not None:
                _discard_upload(stored)
            raise
    except (StorageError, PyMongoError) as e:
        current_app.logger.exception("Failed to submit application")
        return jsonify(message="Failed to submit application", error=str(e)), 500

    return jsonify(message="Application submitted successfully"), 201


@bp.get("/admin/resumes")
def admin_list_resumes():
    _, error_response = require_admin()
    if error_response is not None:
        return error_response

    try:
        return jsonify(resume_service.list_resumes()), 200
    except PyMongoError:
        current_app.logger.exception("Failed to fetch resumes")
        return jsonify(message="Failed to fetch resumes"), 500


@bp.get("/admin/applications")
def admin_list_applications():
    _, error_response = require_admin()
    if error_response is not None:
        return error_response

    try:
        return jsonify(application_service.list_applications()), 200
    except PyMongoError:
        current_app.logger.exception("Failed to fetch applications")
        return jsonify(message="Failed to fetch applications"), 500


@bp.get("/admin/export/applications")
def admin_export_applications():
    """Download every application as CSV."""
    _, error_response = require_admin()
    if error_response is not None:
        return error_response

    try:
        applications = application_service.list_applications(newest_first=False)
    except PyMongoError:
        current_app.logger.exception("Failed to export applications")
        return jsonify(message="Failed to export applications"), 500

    body = format_csv(applications, APPLICATION_COLUMNS)
    return _csv_attachment(body, export_filename("job-applications"))


@bp.get("/admin/export/resumes")
def admin_export_resumes():
    """Download every resume record, with storage links, as CSV."""
    _, error_response = require_admin()
    if error_response is not None:
        return error_response

    try:
        resumes = resume_service.list_resumes()
    except PyMongoError as e:
        current_app.logger.exception("Export error")
        return jsonify(message="Failed to export resumes", error=str(e)), 500

    body = format_csv(resumes, RESUME_COLUMNS)
    return _csv_attachment(body, export_filename("resumes-export"))


@bp.get("/admin/export/jobs")
def admin_export_jobs():
    """Download every job posting as CSV."""
    _, error_response = require_admin()
    if error_response is not None:
        return error_response

    try:
        jobs = job_service.list_jobs()
    except PyMongoError:
        current_app.logger.exception("Failed to export jobs")
        return jsonify(message="Failed to export jobs"), 500

    body = format_csv(jobs, JOB_COLUMNS)
    return _csv_attachment(body, export_filename("jobs-export"))


@bp.get("/admin/download/<resume_id>")
def admin_download_resume(resume_id: str):
    """Redirect to the stored resume file."""
    _, error_response = require_admin()
    if error_response is not None:
        return error_response

    try:
        resume = resume_service.get_resume(resume_id)
    except PyMongoError as e:
        current_app.logger.exception("Failed to get resume")
        return jsonify(message="Failed to get resume", error=str(e)), 500

    if not resume or not resume.get("storageUrl"):
        return jsonify(message="Resume not found"), 404

    return redirect(resume["storageUrl"])
