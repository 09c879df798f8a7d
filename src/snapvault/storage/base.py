"""Abstract storage backend interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class ObjectInfo:
    """Listing entry for a stored object."""

    key: str
    last_modified: Optional[datetime] = None
    size: Optional[int] = None


@dataclass(frozen=True)
class PresignedPost:
    """Signed form-upload policy returned by a backend."""

    url: str
    fields: dict[str, str] = field(default_factory=dict)


class StorageBackend(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod
    def public_url(self, key: str) -> str:
        """Return the URL an object will be served from once written."""
        pass

    @abstractmethod
    async def create_presigned_post(
        self, key: str, content_type: str, max_size: int, expires_in: timedelta
    ) -> PresignedPost:
        """Sign a form-upload policy for exactly one key.

        The signed policy must pin the Content-Type to ``content_type`` and
        restrict the body length to ``[0, max_size]``.

        Args:
            key: Object key the policy authorizes
            content_type: Exact MIME type the upload must declare
            max_size: Maximum accepted body length in bytes
            expires_in: Policy lifetime

        Returns:
            Endpoint URL and the form fields to send ahead of the file
        """
        pass

    @abstractmethod
    async def store_file(self, key: str, content_type: str, data: bytes) -> str:
        """Write bytes under ``key`` and return the object's public URL."""
        pass

    @abstractmethod
    async def list_objects(self, prefix: str) -> list[ObjectInfo]:
        """List every object whose key starts with ``prefix``."""
        pass

    @abstractmethod
    async def object_exists(self, key: str) -> bool:
        """Return True if an object exists under ``key``."""
        pass

    @abstractmethod
    def get_backend_name(self) -> str:
        """Return backend identifier."""
        pass

    def close(self) -> None:
        """Release client resources held by the backend."""
        pass
