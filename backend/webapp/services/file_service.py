"""Image upload, lookup and deletion.

Upload writes the S3 object first and the metadata row second; delete runs
the same two steps in reverse. Neither sequence is transactional: if the
second step fails the first is not undone, so an orphaned object (upload)
or a row pointing at a deleted object (delete) can be left behind.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from starlette.concurrency import run_in_threadpool

from ..core.errors import BadRequest, NotFound, ServiceUnavailable
from ..core.metrics import Metrics, timed
from ..models import FileRecord
from .db_service import FileRepository
from .storage_service import S3BlobStore, build_object_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageUpload:
    """A validated single-image multipart part."""

    file_name: str
    content_type: str
    body: bytes


def _today_utc():
    return datetime.now(timezone.utc).date()


async def upload_file(
    upload: ImageUpload,
    repo: FileRepository,
    blob_store: S3BlobStore,
    metrics: Metrics,
) -> FileRecord:
    if not blob_store.bucket:
        logger.error("Upload rejected - S3 bucket is not configured")
        raise BadRequest("S3 bucket is not configured")

    with timed(metrics, "api.file.upload.duration"):
        file_id = str(uuid.uuid4())
        s3_key = build_object_key(file_id, upload.file_name)
        logger.info(f"File Upload - Filename: {upload.file_name}, ID: {file_id}, S3 Key: {s3_key}")

        try:
            with timed(metrics, "api.file.s3_upload_duration"):
                await run_in_threadpool(blob_store.put, upload.body, s3_key, upload.content_type)
        except Exception as e:
            logger.error(f"S3 upload failed for {upload.file_name}: {e!r}")
            metrics.increment("api.file.upload.error")
            raise ServiceUnavailable("S3 upload failed") from e

        record = FileRecord(
            id=file_id,
            file_name=upload.file_name,
            url=blob_store.locator(s3_key),
            upload_date=_today_utc(),
        )
        try:
            with timed(metrics, "api.file.db_create_duration"):
                await repo.create(record)
        except Exception as e:
            # The S3 object stays behind; there is no compensating delete.
            logger.error(f"Metadata insert failed for {file_id}, orphaned object {record.url}: {e!r}")
            metrics.increment("api.file.upload.error")
            raise ServiceUnavailable("metadata insert failed") from e

    metrics.increment("api.file.upload.count")
    logger.info(f"File successfully uploaded and stored - File ID: {file_id}")
    return record


async def get_file(file_id: str, repo: FileRepository, metrics: Metrics) -> FileRecord:
    """Look up a file by ID. Lookup failures are reported as not found."""
    with timed(metrics, "api.file.get.duration"):
        try:
            with timed(metrics, "api.file.db_query_duration"):
                record = await repo.find_by_id(file_id)
        except Exception as e:
            logger.error(f"File lookup failed for {file_id}: {e!r}")
            raise NotFound("file lookup failed") from e

        if record is None:
            raise NotFound(f"no file with id {file_id}")

    metrics.increment("api.file.get.count")
    return record


async def delete_file(
    file_id: str,
    repo: FileRepository,
    blob_store: S3BlobStore,
    metrics: Metrics,
) -> None:
    """Delete the S3 object, then its metadata row.

    Any failure along the way, including backend errors, is reported as not
    found.
    """
    with timed(metrics, "api.file.delete.duration"):
        try:
            record = await repo.find_by_id(file_id)
            if record is None:
                raise NotFound(f"no file with id {file_id}")

            s3_key = blob_store.key_from_locator(record.url)
            with timed(metrics, "api.file.s3_delete_duration"):
                await run_in_threadpool(blob_store.delete, s3_key)
            logger.info(f"Deleted S3 object {s3_key} for File ID: {file_id}")

            with timed(metrics, "api.file.db_delete_duration"):
                await repo.delete(record)
        except NotFound:
            raise
        except Exception as e:
            logger.error(f"File delete failed for {file_id}: {e!r}")
            metrics.increment("api.file.delete.error")
            raise NotFound("file delete failed") from e

    metrics.increment("api.file.delete.count")
    logger.info(f"File deleted - File ID: {file_id}")
