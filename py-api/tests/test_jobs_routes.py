"""Tests for the /api/jobs routes."""

from __future__ import annotations

import io
import os
from datetime import datetime

from bson import ObjectId

from eventdesk.services import application_service, job_service


def _upload_dir_files(app):
    upload_dir = app.config["UPLOAD_DIR"]
    return os.listdir(upload_dir) if os.path.isdir(upload_dir) else []


def test_jobs_require_authentication(client):
    response = client.get("/api/jobs")

    assert response.status_code == 401


def test_create_job_requires_admin(client, attendee_headers):
    response = client.post("/api/jobs", json={"title": "Engineer", "company": "Acme"}, headers=attendee_headers)

    assert response.status_code == 403


def test_create_and_list_jobs(client, admin_headers, attendee_headers):
    response = client.post(
        "/api/jobs",
        json={"title": "Engineer", "company": "Acme", "location": "Remote"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.get_json()["title"] == "Engineer"

    listed = client.get("/api/jobs", headers=attendee_headers).get_json()

    assert [job["title"] for job in listed] == ["Engineer"]
    assert listed[0]["skills"] == ""


def test_create_job_without_company_is_rejected(client, admin_headers):
    response = client.post("/api/jobs", json={"title": "Engineer"}, headers=admin_headers)

    assert response.status_code == 400


def test_upload_csv_inserts_valid_rows_and_removes_temp_file(app, client, admin_headers, mongo_db):
    data = {
        "file": (
            io.BytesIO(b"title,company,location\nEngineer,Acme,Remote\n,NoTitle,\nDesigner,Globex,Berlin\n"),
            "jobs.csv",
        )
    }

    response = client.post("/api/jobs/upload-csv", data=data, headers=admin_headers, content_type="multipart/form-data")

    assert response.status_code == 200
    assert response.get_json()["message"] == "2 jobs uploaded successfully"
    assert mongo_db.jobs.count_documents({}) == 2
    assert _upload_dir_files(app) == []


def test_upload_csv_without_file(client, admin_headers):
    response = client.post("/api/jobs/upload-csv", data={}, headers=admin_headers, content_type="multipart/form-data")

    assert response.status_code == 400
    assert response.get_json()["message"] == "No file uploaded"


def test_upload_csv_parse_failure_removes_temp_file(app, client, admin_headers, mongo_db):
    data = {"file": (io.BytesIO(b'title,company\n"Engineer,Acme\n'), "broken.csv")}

    response = client.post("/api/jobs/upload-csv", data=data, headers=admin_headers, content_type="multipart/form-data")

    assert response.status_code == 500
    assert response.get_json()["message"] == "CSV parsing failed"
    assert mongo_db.jobs.count_documents({}) == 0
    assert _upload_dir_files(app) == []


def test_upload_csv_insert_failure_removes_temp_file(app, client, admin_headers, monkeypatch):
    from pymongo.errors import PyMongoError

    def failing_insert(jobs):
        raise PyMongoError("write failed")

    monkeypatch.setattr(job_service, "insert_jobs", failing_insert)
    data = {"file": (io.BytesIO(b"title,company\nEngineer,Acme\n"), "jobs.csv")}

    response = client.post("/api/jobs/upload-csv", data=data, headers=admin_headers, content_type="multipart/form-data")

    assert response.status_code == 500
    assert response.get_json()["message"] == "Failed to save jobs"
    assert _upload_dir_files(app) == []


def test_upload_resume_stores_file_and_record(client, attendee_headers, s3_client, mongo_db):
    data = {
        "resume": (io.BytesIO(b"%PDF-1.4 resume"), "Ann Resume.pdf", "application/pdf"),
        "name": "Ann",
        "phone": "555-0100",
        "skills": "python, flask",
    }

    response = client.post("/api/jobs/resumes", data=data, headers=attendee_headers, content_type="multipart/form-data")

    assert response.status_code == 201
    body = response.get_json()
    assert body["message"] == "Resume uploaded successfully"

    resume = mongo_db.resumes.find_one({"userEmail": "ann@example.com"})
    assert resume["originalName"] == "Ann Resume.pdf"
    assert resume["storageKey"].startswith("resumes/")
    assert resume["storageKey"].endswith("Ann_Resume.pdf")
    assert resume["filename"] == resume["storageKey"].split("/")[-1]
    assert body["storageUrl"] == resume["storageUrl"]
    assert ("test-bucket", resume["storageKey"]) in s3_client.uploads


def test_upload_resume_without_file(client, attendee_headers, s3_client):
    response = client.post("/api/jobs/resumes", data={"name": "Ann"}, headers=attendee_headers, content_type="multipart/form-data")

    assert response.status_code == 400


def test_apply_twice_returns_duplicate_error(client, attendee_headers):
    form = {"jobId": "job-1", "jobTitle": "Engineer", "company": "Acme", "name": "Ann"}

    first = client.post("/api/jobs/apply", data=form, headers=attendee_headers)
    second = client.post("/api/jobs/apply", data=form, headers=attendee_headers)

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.get_json()["message"] == "You have already applied for this job"


def test_apply_with_resume_uploads_it(client, attendee_headers, s3_client, mongo_db):
    data = {"jobId": "job-2", "resume": (io.BytesIO(b"cv"), "cv.pdf")}

    response = client.post("/api/jobs/apply", data=data, headers=attendee_headers, content_type="multipart/form-data")

    assert response.status_code == 201
    application = mongo_db.job_applications.find_one({"jobId": "job-2"})
    assert application["resumeUrl"].startswith("https://test-bucket.s3.us-east-1.amazonaws.com/resumes/")
    assert len(s3_client.uploads) == 1


def test_apply_requires_job_id(client, attendee_headers):
    response = client.post("/api/jobs/apply", data={"name": "Ann"}, headers=attendee_headers)

    assert response.status_code == 400


def test_admin_lists_and_exports_applications(client, admin_headers, mongo_db):
    mongo_db.job_applications.insert_one(
        {
            "userEmail": "ann@example.com",
            "jobId": "job-1",
            "jobTitle": "Engineer, Backend",
            "name": "Ann",
            "createdAt": datetime(2025, 1, 5),
        }
    )

    listed = client.get("/api/jobs/admin/applications", headers=admin_headers)
    assert listed.status_code == 200
    assert listed.get_json()[0]["userEmail"] == "ann@example.com"

    exported = client.get("/api/jobs/admin/export/applications", headers=admin_headers)
    assert exported.status_code == 200
    assert exported.mimetype == "text/csv"
    assert "filename=job-applications-" in exported.headers["Content-Disposition"]
    assert '"Engineer, Backend"' in exported.get_data(as_text=True)


def test_admin_export_resumes_and_jobs(client, admin_headers, mongo_db):
    mongo_db.resumes.insert_one({"userEmail": "ann@example.com", "storageUrl": "https://bucket/r.pdf"})
    mongo_db.jobs.insert_one({"title": "Engineer", "company": "Acme"})

    resumes = client.get("/api/jobs/admin/export/resumes", headers=admin_headers)
    jobs = client.get("/api/jobs/admin/export/jobs", headers=admin_headers)

    assert "filename=resumes-export-" in resumes.headers["Content-Disposition"]
    assert "https://bucket/r.pdf" in resumes.get_data(as_text=True)
    assert "filename=jobs-export-" in jobs.headers["Content-Disposition"]
    assert '"Engineer","Acme"' in jobs.get_data(as_text=True)


def test_admin_routes_reject_attendees(client, attendee_headers):
    assert client.get("/api/jobs/admin/resumes", headers=attendee_headers).status_code == 403
    assert client.get("/api/jobs/admin/export/applications", headers=attendee_headers).status_code == 403


def test_admin_download_redirects_to_storage(client, admin_headers, mongo_db):
    result = mongo_db.resumes.insert_one({"userEmail": "ann@example.com", "storageUrl": "https://bucket/r.pdf"})

    response = client.get(f"/api/jobs/admin/download/{result.inserted_id}", headers=admin_headers)

    assert response.status_code == 302
    assert response.headers["Location"] == "https://bucket/r.pdf"


def test_admin_download_unknown_resume(client, admin_headers):
    assert client.get(f"/api/jobs/admin/download/{ObjectId()}", headers=admin_headers).status_code == 404
    assert client.get("/api/jobs/admin/download/not-an-id", headers=admin_headers).status_code == 404


def test_create_job_rejects_non_object_body(client, admin_headers):
    response = client.post("/api/jobs", json=[{"title": "Engineer", "company": "Acme"}], headers=admin_headers)

    assert response.status_code == 400
    assert response.get_json()["message"] == "Expected a JSON object"


def test_apply_runs_a_single_lookup(client, attendee_headers, monkeypatch):
    calls = []
    original = application_service.has_applied

    def counting_has_applied(user_email, job_id):
        calls.append(job_id)
        return original(user_email, job_id)

    monkeypatch.setattr(application_service, "has_applied", counting_has_applied)

    response = client.post("/api/jobs/apply", data={"jobId": "job-1"}, headers=attendee_headers)

    assert response.status_code == 201
    assert calls == ["job-1"]


def test_concurrent_duplicate_removes_uploaded_resume(client, attendee_headers, s3_client, mongo_db, monkeypatch):
    client.post("/api/jobs/apply", data={"jobId": "job-3"}, headers=attendee_headers)
    # A second request whose lookup ran before the first insert landed.
    monkeypatch.setattr(application_service, "has_applied", lambda user_email, job_id: False)

    data = {"jobId": "job-3", "resume": (io.BytesIO(b"cv"), "cv.pdf")}
    response = client.post("/api/jobs/apply", data=data, headers=attendee_headers, content_type="multipart/form-data")

    assert response.status_code == 400
    assert response.get_json()["message"] == "You have already applied for this job"
    assert s3_client.uploads == {}
    assert len(s3_client.deleted) == 1
    assert mongo_db.job_applications.count_documents({"jobId": "job-3"}) == 1
