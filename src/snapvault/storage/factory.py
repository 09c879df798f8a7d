"""Storage backend construction."""

from snapvault.core.config import Settings
from snapvault.storage.base import StorageBackend
from snapvault.storage.gcs import GCSStorageBackend


def create_storage_backend(config: Settings) -> StorageBackend:
    """Build the storage backend selected by STORAGE_BACKEND.

    Raises:
        ValueError: If the backend is unknown or misconfigured
    """
    if config.STORAGE_BACKEND == "gcs":
        return GCSStorageBackend(
            bucket_name=config.GCS_BUCKET_NAME,
            project_id=config.GCP_PROJECT_ID or None,
            public_base_url=config.public_base_url,
        )
    raise ValueError(f"Unsupported STORAGE_BACKEND: {config.STORAGE_BACKEND}")
