"""
Receipt storage port

Payment receipts are uploaded to object storage (S3 or MinIO) and only the
resulting public URL is kept on the booking. The backend is chosen with
RECEIPT_STORAGE_BACKEND; development and tests use Django's file storage.
"""

from __future__ import annotations

import logging
import mimetypes
import re
import time
import uuid

import boto3  # type: ignore
from botocore.client import Config as BotoConfig  # type: ignore
from botocore.exceptions import ClientError, EndpointConnectionError  # type: ignore
from django.conf import settings  # type: ignore
from django.core.files.storage import default_storage  # type: ignore
from django.utils.module_loading import import_string  # type: ignore

from shared.domain.errors import StorageFailure

logger = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^a-z0-9.]+")


def build_receipt_path(slot_id, user_id, original_name: str = "", now_ms: int | None = None) -> str:
    """Key layout: <user>/<slot>/<epoch_ms>-<uuid>-<sanitized name>."""
    sanitized = _UNSAFE_NAME_CHARS.sub("-", original_name.lower()) if original_name else "receipt"
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{user_id}/{slot_id}/{now_ms}-{uuid.uuid4()}-{sanitized}"


class ReceiptStorage:
    """Uploads a receipt file and returns its public URL."""

    def upload(self, file_obj, path: str) -> str:  # pragma: no cover - interface
        raise NotImplementedError


class S3ReceiptStorage(ReceiptStorage):
    """S3/MinIO backed receipt storage."""

    def __init__(self):
        self.s3_client = boto3.client(
            "s3",
            endpoint_url=getattr(settings, "S3_ENDPOINT_URL", None),
            aws_access_key_id=getattr(settings, "S3_ACCESS_KEY", ""),
            aws_secret_access_key=getattr(settings, "S3_SECRET_KEY", ""),
            region_name=getattr(settings, "S3_REGION", "us-east-1"),
            config=BotoConfig(
                signature_version="s3v4",
                s3={"addressing_style": getattr(settings, "S3_ADDRESSING_STYLE", "path")},  # path style for MinIO
            ),
            use_ssl=getattr(settings, "S3_USE_SSL", False),
            verify=getattr(settings, "S3_USE_SSL", False),
        )
        self.bucket_name = getattr(settings, "S3_RECEIPTS_BUCKET", "receipts")
        self.public_base = getattr(settings, "S3_PUBLIC_BASE", "").rstrip("/")

    def upload(self, file_obj, path: str) -> str:
        content_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
        file_obj.seek(0)
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=path,
                Body=file_obj.read(),
                ContentType=content_type,
                CacheControl="max-age=3600",
            )
        except (ClientError, EndpointConnectionError) as e:
            logger.error(f"Receipt upload to bucket {self.bucket_name} failed: {e}")
            raise StorageFailure("Unable to upload receipt. Please try again.") from e
        return self.url(path)

    def url(self, path: str) -> str:
        if self.public_base:
            return f"{self.public_base}/{path}"
        endpoint = (getattr(settings, "S3_ENDPOINT_URL", "") or "").rstrip("/")
        return f"{endpoint}/{self.bucket_name}/{path}"


class DjangoFileReceiptStorage(ReceiptStorage):
    """Stores receipts through Django's default file storage (MEDIA_ROOT)."""

    prefix = "receipts"

    def upload(self, file_obj, path: str) -> str:
        try:
            saved_name = default_storage.save(f"{self.prefix}/{path}", file_obj)
        except OSError as e:
            logger.error(f"Receipt upload to local storage failed: {e}")
            raise StorageFailure("Unable to upload receipt. Please try again.") from e
        return default_storage.url(saved_name)


def get_receipt_storage() -> ReceiptStorage:
    backend = import_string(settings.RECEIPT_STORAGE_BACKEND)
    return backend()
