"""Service for S3 storage operations."""
import logging
import os
import uuid

import boto3
from botocore.config import Config

from ..core.config import Settings

logger = logging.getLogger(__name__)


def build_object_key(file_id: str, original_name: str) -> str:
    """Build the S3 key for an upload: ``<file_id>/<random uuid><ext>``."""
    _, ext = os.path.splitext(original_name)
    return f"{file_id}/{uuid.uuid4()}{ext}"


class S3BlobStore:
    """One bucket, addressed by key. Locators are ``<bucket>/<key>``."""

    def __init__(self, client, bucket: str):
        self._client = client
        self.bucket = bucket

    def put(self, body: bytes, key: str, content_type: str) -> None:
        self._client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
        )

    def delete(self, key: str) -> None:
        self._client.delete_object(Bucket=self.bucket, Key=key)

    def locator(self, key: str) -> str:
        return f"{self.bucket}/{key}"

    def key_from_locator(self, url: str) -> str:
        prefix = f"{self.bucket}/"
        if url.startswith(prefix):
            return url[len(prefix):]
        return url


def create_s3_client(settings: Settings):
    """S3 client using the default credential chain (env vars, shared config, IAM role)."""
    return boto3.client(
        "s3",
        region_name=settings.aws_region,
        config=Config(
            connect_timeout=settings.io_timeout_seconds,
            read_timeout=settings.io_timeout_seconds,
            retries={"mode": "standard", "total_max_attempts": 1},
        ),
    )


def create_blob_store(settings: Settings) -> S3BlobStore:
    if not settings.s3_bucket:
        logger.warning("S3_BUCKET is not set; uploads will be rejected")
    return S3BlobStore(create_s3_client(settings), settings.s3_bucket)
