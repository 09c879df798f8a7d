"""Google Cloud Storage backend."""

import asyncio
import logging
from datetime import timedelta
from typing import Any, Optional

from google.api_core.exceptions import GoogleAPIError, ServerError, TooManyRequests
from google.auth.credentials import Signing
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage
from google.oauth2 import service_account
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from snapvault.core.exceptions import StorageError
from snapvault.storage.base import ObjectInfo, PresignedPost, StorageBackend

logger = logging.getLogger(__name__)

# Only idempotent reads are retried; uploads and signing are never retried.
_read_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=5),
    retry=retry_if_exception_type((ServerError, TooManyRequests)),
    reraise=True,
)


class GCSStorageBackend(StorageBackend):
    """Google Cloud Storage backend."""

    def __init__(
        self,
        bucket_name: str,
        project_id: Optional[str] = None,
        public_base_url: Optional[str] = None,
        client: Optional[storage.Client] = None,
    ):
        if not bucket_name:
            raise ValueError("GCS_BUCKET_NAME not configured")

        self.bucket_name = bucket_name
        self._client = client or storage.Client(project=project_id or None)
        self._bucket = self._client.bucket(bucket_name)
        self._public_base_url = (
            public_base_url or f"https://storage.googleapis.com/{bucket_name}"
        ).rstrip("/")
        self._signing_credentials: Any = None

    def public_url(self, key: str) -> str:
        return f"{self._public_base_url}/{key}"

    def _get_signing_credentials(self) -> Any:
        """Return credentials able to sign policies.

        Service-account credentials sign locally. Anything else (Cloud Run,
        GCE, GKE metadata credentials) signs through the IAM signBlob API,
        which needs roles/iam.serviceAccountTokenCreator on the account.
        """
        if self._signing_credentials is not None:
            return self._signing_credentials

        credentials = getattr(self._client, "_credentials", None)
        if isinstance(credentials, Signing):
            self._signing_credentials = credentials
            return credentials

        from google.auth import compute_engine, iam
        from google.auth.transport import requests as auth_requests

        compute_credentials = compute_engine.Credentials()
        auth_request = auth_requests.Request()
        compute_credentials.refresh(auth_request)
        service_account_email = compute_credentials.service_account_email

        signer = iam.Signer(
            request=auth_request,
            credentials=compute_credentials,
            service_account_email=service_account_email,
        )
        # token_uri is required by the constructor; signing goes through the IAM signer
        self._signing_credentials = service_account.Credentials(
            signer=signer,
            service_account_email=service_account_email,
            token_uri="https://oauth2.googleapis.com/token",
        )
        return self._signing_credentials

    def _sign_post_policy(
        self, key: str, content_type: str, max_size: int, expires_in: timedelta
    ) -> PresignedPost:
        policy = self._client.generate_signed_post_policy_v4(
            self.bucket_name,
            key,
            expiration=expires_in,
            conditions=[["content-length-range", 0, max_size]],
            # Each field is also added to the policy as an exact-match condition
            fields={"Content-Type": content_type},
            credentials=self._get_signing_credentials(),
            scheme="https",
        )
        return PresignedPost(
            url=policy["url"],
            fields={name: str(value) for name, value in policy["fields"].items()},
        )

    async def create_presigned_post(
        self, key: str, content_type: str, max_size: int, expires_in: timedelta
    ) -> PresignedPost:
        try:
            return await asyncio.to_thread(
                self._sign_post_policy, key, content_type, max_size, expires_in
            )
        except (GoogleAuthError, GoogleAPIError, AttributeError, ValueError) as e:
            logger.error(
                "Failed to sign upload policy",
                extra={"bucket": self.bucket_name, "object_name": key, "error": str(e)},
            )
            raise StorageError(f"Failed to sign upload policy: {e}") from e

    async def store_file(self, key: str, content_type: str, data: bytes) -> str:
        blob = self._bucket.blob(key)
        try:
            await asyncio.to_thread(blob.upload_from_string, data, content_type=content_type)
        except GoogleAPIError as e:
            logger.error(
                "Failed to upload object",
                extra={"bucket": self.bucket_name, "object_name": key, "error": str(e)},
            )
            raise StorageError(f"Failed to store file: {e}") from e

        logger.info(
            "Object uploaded",
            extra={"bucket": self.bucket_name, "object_name": key, "size_bytes": len(data)},
        )
        return self.public_url(key)

    @_read_retry
    def _list_blobs(self, prefix: str) -> list[ObjectInfo]:
        return [
            ObjectInfo(key=blob.name, last_modified=blob.updated, size=blob.size)
            for blob in self._client.list_blobs(self._bucket, prefix=prefix)
        ]

    async def list_objects(self, prefix: str) -> list[ObjectInfo]:
        try:
            return await asyncio.to_thread(self._list_blobs, prefix)
        except GoogleAPIError as e:
            logger.error(
                "Failed to list objects",
                extra={"bucket": self.bucket_name, "prefix": prefix, "error": str(e)},
            )
            raise StorageError(f"Failed to list objects: {e}") from e

    @_read_retry
    def _blob_exists(self, key: str) -> bool:
        return self._bucket.blob(key).exists()

    async def object_exists(self, key: str) -> bool:
        try:
            return await asyncio.to_thread(self._blob_exists, key)
        except GoogleAPIError as e:
            logger.error(
                "Failed to check object existence",
                extra={"bucket": self.bucket_name, "object_name": key, "error": str(e)},
            )
            raise StorageError(f"Failed to verify file: {e}") from e

    def get_backend_name(self) -> str:
        return "gcs"

    def close(self) -> None:
        self._client.close()
