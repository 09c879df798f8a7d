"""FastAPI dependencies resolving the clients built at startup."""

from fastapi import Depends, Request

from snapvault.services.listing import ObjectLister
from snapvault.services.presign import PresignService
from snapvault.storage.base import StorageBackend
from snapvault.storage.upload_store import UploadStore


def get_storage_backend(request: Request) -> StorageBackend:
    """Storage backend constructed in the application lifespan."""
    return request.app.state.storage_backend


def get_upload_store(request: Request) -> UploadStore:
    return request.app.state.upload_store


def get_presign_service(
    backend: StorageBackend = Depends(get_storage_backend),
    upload_store: UploadStore = Depends(get_upload_store),
) -> PresignService:
    return PresignService(backend, upload_store)


def get_object_lister(backend: StorageBackend = Depends(get_storage_backend)) -> ObjectLister:
    return ObjectLister(backend)
