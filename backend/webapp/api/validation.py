"""Request-shape checks shared by the parameterless endpoints.

These endpoints take no client data beyond the path (and, for upload, the
image part). Query strings, bodies and credentials are rejected outright
instead of being ignored.
"""
from __future__ import annotations

import logging

from fastapi import Request
from starlette.datastructures import UploadFile

from ..core.config import Settings
from ..core.errors import BadRequest
from ..services.file_service import ImageUpload

logger = logging.getLogger(__name__)

AUTH_HEADERS = ("authentication", "authorization")


def _declared_length(request: Request) -> int:
    raw = request.headers.get("content-length")
    if raw is None:
        return 0
    try:
        return int(raw)
    except ValueError:
        raise BadRequest(f"invalid content-length {raw!r}")


async def reject_query_and_auth(request: Request) -> None:
    if request.query_params:
        raise BadRequest("query parameters are not accepted")
    for header in AUTH_HEADERS:
        if header in request.headers:
            raise BadRequest(f"{header} header is not accepted")


async def reject_client_input(request: Request) -> None:
    """Reject query parameters, auth headers and any request body."""
    await reject_query_and_auth(request)
    if _declared_length(request) > 0:
        raise BadRequest("request body is not accepted")
    if await request.body():
        raise BadRequest("request body is not accepted")


async def parse_image_upload(request: Request, settings: Settings) -> ImageUpload:
    """Extract the single image part of a multipart upload.

    Exactly one file part is allowed, under ``settings.upload_field_name``,
    with an ``image/*`` content type and at most ``settings.max_upload_bytes``
    bytes. Plain form fields are ignored.
    """
    try:
        form = await request.form()
    except Exception as e:
        raise BadRequest(f"unparseable multipart body: {e}") from e

    try:
        parts = [(field, value) for field, value in form.multi_items() if isinstance(value, UploadFile)]
        if len(parts) != 1:
            raise BadRequest(f"expected exactly one file part, got {len(parts)}")

        field, part = parts[0]
        if field != settings.upload_field_name:
            raise BadRequest(f"unexpected file field {field!r}")
        if not part.filename:
            raise BadRequest("file part has no filename")

        content_type = part.content_type or ""
        if not content_type.startswith("image/"):
            raise BadRequest(f"only image files are allowed, got {content_type!r}")

        body = await part.read(settings.max_upload_bytes + 1)
        if len(body) > settings.max_upload_bytes:
            raise BadRequest(f"file exceeds {settings.max_upload_bytes} bytes")
    finally:
        await form.close()

    logger.debug(f"Accepted upload part {part.filename} ({content_type}, {len(body)} bytes)")
    return ImageUpload(file_name=part.filename, content_type=content_type, body=body)
