"""Issues presigned direct-upload targets."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from snapvault.core.config import settings
from snapvault.core.exceptions import PresignSigningError, PresignValidationError, StorageError
from snapvault.core.logging import object_key_context
from snapvault.models.image import ImageDimensions
from snapvault.models.upload import PresignedTarget
from snapvault.services.validation import validate_file
from snapvault.storage.base import StorageBackend
from snapvault.storage.keys import build_object_key
from snapvault.storage.upload_store import UploadRecord, UploadStatus, UploadStore

logger = logging.getLogger(__name__)


class PresignService:
    """Validates upload requests and signs one-key upload policies.

    Validation here is independent of the client's own checks; the client
    side is a UX shortcut, this is the enforcement point.
    """

    def __init__(
        self,
        backend: StorageBackend,
        upload_store: UploadStore,
        max_file_size: Optional[int] = None,
        allowed_types: Optional[list[str]] = None,
        expires_in: Optional[timedelta] = None,
    ):
        self.backend = backend
        self.upload_store = upload_store
        self.max_file_size = max_file_size if max_file_size is not None else settings.max_upload_bytes
        self.allowed_types = allowed_types if allowed_types is not None else settings.allowed_mime_types
        self.expires_in = expires_in or timedelta(seconds=settings.PRESIGN_EXPIRES_SECONDS)

    async def create_presigned_upload(
        self,
        file_name: str,
        content_type: str,
        file_size: int,
        dimensions: Optional[ImageDimensions] = None,
    ) -> PresignedTarget:
        """Issue a PresignedTarget for one file.

        Raises:
            PresignValidationError: If the type or size violates the policy
            PresignSigningError: If the storage backend fails to sign
        """
        reason = validate_file(
            file_size, content_type, max_size=self.max_file_size, allowed_types=self.allowed_types
        )
        if reason:
            logger.info(
                "Presign request rejected",
                extra={"file_name": file_name, "content_type": content_type, "size_bytes": file_size},
            )
            raise PresignValidationError(reason)

        key = build_object_key(file_name, dimensions)
        object_key_context.set(key)
        issued_at = datetime.now(timezone.utc)

        try:
            post = await self.backend.create_presigned_post(
                key, content_type, self.max_file_size, self.expires_in
            )
        except StorageError as e:
            raise PresignSigningError(str(e)) from e

        # Targets past their expiry can no longer be used
        pruned = self.upload_store.prune_pending(issued_at - self.expires_in)
        if pruned:
            logger.debug("Pruned expired upload records", extra={"count": pruned})

        self.upload_store.create(
            UploadRecord(
                key=key,
                file_name=file_name,
                content_type=content_type,
                size_bytes=file_size,
                storage_backend=self.backend.get_backend_name(),
                status=UploadStatus.PENDING,
                created_at=issued_at,
            )
        )

        logger.info(
            "Upload target issued",
            extra={
                "file_name": file_name,
                "content_type": content_type,
                "size_bytes": file_size,
                "expires_in_seconds": int(self.expires_in.total_seconds()),
            },
        )

        return PresignedTarget(
            key=key,
            upload_url=post.url,
            public_url=self.backend.public_url(key),
            width=dimensions.width if dimensions else None,
            height=dimensions.height if dimensions else None,
            fields=post.fields,
            expires_at=issued_at + self.expires_in,
        )
