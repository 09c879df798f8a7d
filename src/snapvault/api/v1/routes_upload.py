"""Upload API routes."""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Body, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse

from snapvault.core.exceptions import PresignSigningError, PresignValidationError, StorageError
from snapvault.core.logging import object_key_context
from snapvault.models.image import ImagePage, StoredObject
from snapvault.models.upload import (
    CompleteUploadRequest,
    ErrorResponse,
    PresignRequest,
    PresignResponse,
    UploadResponse,
)
from snapvault.services.dimensions import safe_extract_image_dimensions
from snapvault.services.listing import ObjectLister
from snapvault.services.presign import PresignService
from snapvault.services.validation import validate_file
from snapvault.storage.base import StorageBackend
from snapvault.storage.keys import build_object_key, parse_dimensions_from_key
from snapvault.storage.upload_store import UploadRecord, UploadStatus, UploadStore
from snapvault.api.v1.dependencies import (
    get_object_lister,
    get_presign_service,
    get_storage_backend,
    get_upload_store,
)

router = APIRouter(prefix="/api/v1/uploads", tags=["upload"])
logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(by_alias=True),
    )


@router.post(
    "/presign",
    response_model=PresignResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def create_presigned_upload(
    request: PresignRequest = Body(...),
    service: PresignService = Depends(get_presign_service),
):
    """Issue a short-lived target for a direct browser-to-storage upload."""
    try:
        target = await service.create_presigned_upload(
            file_name=request.file_name,
            content_type=request.file_type,
            file_size=request.file_size,
            dimensions=request.dimensions,
        )
    except PresignValidationError as e:
        return _error(400, str(e))
    except PresignSigningError as e:
        logger.error(f"Failed to create upload: {e}", exc_info=True)
        return _error(502, f"Failed to create upload: {e}")

    return PresignResponse(data=target)


@router.post("/complete", response_model=StoredObject)
async def complete_upload(
    request: CompleteUploadRequest = Body(...),
    backend: StorageBackend = Depends(get_storage_backend),
    upload_store: UploadStore = Depends(get_upload_store),
) -> StoredObject:
    """Confirm a direct upload landed and return its derived metadata."""
    key = request.key.strip()
    if not key:
        raise HTTPException(status_code=400, detail="key is required")
    object_key_context.set(key)

    record = upload_store.get(key)
    if not record:
        raise HTTPException(status_code=404, detail="Upload record not found")

    try:
        exists = await backend.object_exists(key)
    except StorageError as e:
        logger.error(f"Failed to check file existence: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to verify file")

    if not exists:
        raise HTTPException(status_code=409, detail="File does not exist in storage")

    completed_at = datetime.now(timezone.utc)
    upload_store.mark_completed(key, completed_at)

    logger.info(f"Upload completed: key={key}, size={record.size_bytes}")

    return StoredObject(
        key=key,
        url=backend.public_url(key),
        last_modified=completed_at,
        size=record.size_bytes,
        dimensions=parse_dimensions_from_key(key),
    )


@router.post("", response_model=UploadResponse, status_code=201)
async def upload_file(
    file: UploadFile = File(...),
    backend: StorageBackend = Depends(get_storage_backend),
    upload_store: UploadStore = Depends(get_upload_store),
) -> UploadResponse:
    """Upload a file through the server, for clients that cannot POST to storage."""
    file.file.seek(0, 2)
    size_bytes = file.file.tell()
    file.file.seek(0)

    file_name = file.filename or "unnamed"
    content_type = file.content_type or "application/octet-stream"

    reason = validate_file(size_bytes, content_type)
    if reason:
        raise HTTPException(status_code=400, detail=reason)

    data = await file.read()
    dimensions = None
    if content_type.startswith("image/"):
        dimensions = await safe_extract_image_dimensions(data)

    key = build_object_key(file_name, dimensions)
    object_key_context.set(key)

    try:
        url = await backend.store_file(key, content_type, data)
    except StorageError as e:
        logger.error(f"Failed to store file: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to store file")

    created_at = datetime.now(timezone.utc)
    upload_store.create(
        UploadRecord(
            key=key,
            file_name=file_name,
            content_type=content_type,
            size_bytes=size_bytes,
            storage_backend=backend.get_backend_name(),
            status=UploadStatus.COMPLETED,
            created_at=created_at,
            completed_at=created_at,
        )
    )

    logger.info(
        f"Upload completed: key={key}, backend={backend.get_backend_name()}, size={size_bytes}"
    )

    return UploadResponse(key=key, url=url, dimensions=dimensions)


@router.get("", response_model=ImagePage)
async def list_uploads(
    cursor: Optional[str] = Query(None),
    lister: ObjectLister = Depends(get_object_lister),
) -> ImagePage:
    """List every uploaded object, newest first."""
    try:
        return await lister.list_objects(cursor)
    except StorageError as e:
        logger.error(f"Failed to list uploads: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail="Failed to list uploads")
