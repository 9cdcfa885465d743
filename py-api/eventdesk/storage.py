"""S3 object storage for uploaded resumes."""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from eventdesk.errors import StorageError

RESUME_PREFIX = "resumes/"


@dataclass(frozen=True)
class StoredObject:
    """Location of an uploaded object."""

    key: str
    url: str
    original_name: str

    @property
    def filename(self) -> str:
        return self.key.split("/")[-1]


class ObjectStorage:
    """Thin wrapper over a boto3 S3 client bound to one bucket."""

    def __init__(self, client: Any, bucket: str, region: str = "us-east-1", public_base_url: Optional[str] = None):
        self._client = client
        self.bucket = bucket
        self.region = region
        self.public_base_url = (public_base_url or f"https://{bucket}.s3.{region}.amazonaws.com").rstrip("/")

    def url_for(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def build_key(self, original_name: str, prefix: str = RESUME_PREFIX) -> str:
        safe_name = secure_filename(original_name) or "upload"
        return f"{prefix}{int(time.time() * 1000)}-{safe_name}"

    def upload(self, storage: FileStorage, prefix: str = RESUME_PREFIX) -> StoredObject:
        """
        Stream an uploaded file into the bucket.

        Args:
            storage: File from ``request.files``
            prefix: Key prefix inside the bucket

        Returns:
            The key and public URL of the stored object

        Raises:
            StorageError: If S3 rejects the upload
        """
        original_name = storage.filename or ""
        key = self.build_key(original_name, prefix)
        extra_args = {"ContentType": storage.mimetype} if storage.mimetype else {}
        try:
            self._client.upload_fileobj(storage.stream, self.bucket, key, ExtraArgs=extra_args)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to upload {original_name!r} to {self.bucket}") from exc
        return StoredObject(key=key, url=self.url_for(key), original_name=original_name)

    def delete(self, key: str) -> None:
        """Remove an object, raising StorageError if S3 refuses."""
        try:
            self._client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to delete {key!r} from {self.bucket}") from exc


# Global storage instance created on first use
_storage: Optional[ObjectStorage] = None


def get_object_storage() -> ObjectStorage:
    """Get or create the configured object storage."""
    global _storage
    if _storage is None:
        bucket = os.getenv("S3_BUCKET")
        if not bucket:
            raise StorageError("S3_BUCKET is not configured")
        region = os.getenv("AWS_REGION", "us-east-1")
        client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID") or None,
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY") or None,
        )
        _storage = ObjectStorage(client, bucket, region, os.getenv("S3_PUBLIC_BASE_URL"))
    return _storage
