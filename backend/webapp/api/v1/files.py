"""Image file endpoints: upload to S3 with a metadata row in MySQL."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from ...core.config import Settings
from ...core.errors import BadRequest, MethodNotAllowed
from ...core.metrics import Metrics
from ...models import FileResponse
from ...services.db_service import FileRepository
from ...services.file_service import delete_file, get_file, upload_file
from ...services.storage_service import S3BlobStore
from ..deps import get_blob_store, get_file_repo, get_metrics, get_settings
from ..validation import parse_image_upload, reject_client_input, reject_query_and_auth

router = APIRouter(prefix="/v1/file", tags=["files"])


# -------------------------------------------------------------------------
# Collection: /v1/file
# -------------------------------------------------------------------------

@router.post(
    "",
    response_model=FileResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(reject_query_and_auth)],
)
async def upload_image(
    request: Request,
    settings: Settings = Depends(get_settings),
    repo: FileRepository = Depends(get_file_repo),
    blob_store: S3BlobStore = Depends(get_blob_store),
    metrics: Metrics = Depends(get_metrics),
):
    """Upload one image (multipart field ``profilePic`` by default, max 5 MiB)."""
    upload = await parse_image_upload(request, settings)
    record = await upload_file(upload, repo, blob_store, metrics)
    return FileResponse.from_record(record)


@router.get("", include_in_schema=False)
async def get_without_id():
    raise BadRequest("file id is required")


@router.delete("", include_in_schema=False)
async def delete_without_id():
    raise BadRequest("file id is required")


# GET and DELETE on the collection only exist to answer 400; POST is the one
# method that can succeed here, so it is the only one advertised.
@router.api_route("", methods=["HEAD", "PUT", "PATCH", "OPTIONS", "TRACE"], include_in_schema=False)
async def collection_method_not_allowed():
    raise MethodNotAllowed(allow="POST")


# -------------------------------------------------------------------------
# Item: /v1/file/{file_id}
# -------------------------------------------------------------------------

@router.get(
    "/{file_id}",
    response_model=FileResponse,
    dependencies=[Depends(reject_client_input)],
)
async def get_file_details(
    file_id: str,
    repo: FileRepository = Depends(get_file_repo),
    metrics: Metrics = Depends(get_metrics),
):
    record = await get_file(file_id, repo, metrics)
    return FileResponse.from_record(record)


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file_by_id(
    file_id: str,
    repo: FileRepository = Depends(get_file_repo),
    blob_store: S3BlobStore = Depends(get_blob_store),
    metrics: Metrics = Depends(get_metrics),
):
    """Delete the S3 object and then its metadata row."""
    await delete_file(file_id, repo, blob_store, metrics)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.api_route(
    "/{file_id}",
    methods=["HEAD", "POST", "PUT", "PATCH", "OPTIONS", "TRACE"],
    include_in_schema=False,
)
async def item_method_not_allowed(file_id: str):
    raise MethodNotAllowed(allow="GET, DELETE")
