"""Shared pytest fixtures for MongoDB-backed services and routes."""

from __future__ import annotations

import sys
from pathlib import Path

import mongomock
import pytest

# Ensure the application package is importable during tests.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from eventdesk import database, storage  # noqa: E402
from eventdesk.services import auth_service  # noqa: E402
from eventdesk.utils.auth import SESSION_TTL_SECONDS, generate_token, now_seconds  # noqa: E402

ADMIN_EMAIL = "admin@example.com"
ATTENDEE_EMAIL = "ann@example.com"


@pytest.fixture(autouse=True)
def mongo_db(monkeypatch: pytest.MonkeyPatch):
    """Provide an isolated in-memory MongoDB database for each test."""
    test_db_name = "test_eventdesk"
    monkeypatch.setenv("MONGODB_DATABASE", test_db_name)
    monkeypatch.setenv("ADMIN_EMAILS", ADMIN_EMAIL)

    client = mongomock.MongoClient()
    db = client[test_db_name]

    monkeypatch.setattr(database, "get_mongo_client", lambda: client)
    monkeypatch.setattr(database, "get_database", lambda: db)

    yield db

    client.drop_database(test_db_name)


class FakeS3Client:
    """Records ``upload_fileobj`` and ``delete_object`` calls instead of talking to S3."""

    def __init__(self):
        self.uploads = {}
        self.deleted = []

    def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None):
        self.uploads[(bucket, key)] = {"body": fileobj.read(), "extra_args": ExtraArgs or {}}

    def delete_object(self, Bucket, Key):
        self.uploads.pop((Bucket, Key), None)
        self.deleted.append(Key)


@pytest.fixture
def s3_client(monkeypatch: pytest.MonkeyPatch):
    client = FakeS3Client()
    object_storage = storage.ObjectStorage(client, "test-bucket", "us-east-1")
    monkeypatch.setattr(storage, "get_object_storage", lambda: object_storage)
    return client


@pytest.fixture
def app(tmp_path):
    from eventdesk.main import create_app

    flask_app = create_app()
    flask_app.config.update(TESTING=True, UPLOAD_DIR=str(tmp_path / "uploads"))
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


def _issue_token(email: str, role: str) -> str:
    token = generate_token("sess")
    auth_service.save_session(token, email, now_seconds() + SESSION_TTL_SECONDS, role=role)
    return token


@pytest.fixture
def attendee_headers():
    return {"Authorization": f"Bearer {_issue_token(ATTENDEE_EMAIL, 'attendee')}"}


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {_issue_token(ADMIN_EMAIL, 'admin')}"}
