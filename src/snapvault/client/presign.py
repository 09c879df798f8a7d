"""HTTP client for the presign endpoint."""

import logging
from typing import Optional, Protocol

import httpx
from pydantic import ValidationError

from snapvault.core.exceptions import PresignRequestError
from snapvault.models.image import ImageDimensions
from snapvault.models.upload import PresignedTarget, PresignRequest

logger = logging.getLogger(__name__)

PRESIGN_PATH = "/api/v1/uploads/presign"


class Presigner(Protocol):
    """Anything that can issue a PresignedTarget.

    Implemented by PresignClient over HTTP and by
    snapvault.services.presign.PresignService in-process.
    """

    async def create_presigned_upload(
        self,
        file_name: str,
        content_type: str,
        file_size: int,
        dimensions: Optional[ImageDimensions] = None,
    ) -> PresignedTarget:
        ...


class PresignClient:
    """Requests upload targets from a SnapVault server."""

    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self.url = f"{base_url.rstrip('/')}{PRESIGN_PATH}"

    async def create_presigned_upload(
        self,
        file_name: str,
        content_type: str,
        file_size: int,
        dimensions: Optional[ImageDimensions] = None,
    ) -> PresignedTarget:
        """Ask the server for a target; never retried.

        Raises:
            PresignRequestError: If the server refuses or cannot be reached
        """
        payload = PresignRequest(
            file_name=file_name,
            file_type=content_type,
            file_size=file_size,
            dimensions=dimensions,
        ).model_dump(mode="json", by_alias=True)

        try:
            response = await self._client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            logger.warning(
                "Presign request failed",
                extra={"file_name": file_name, "error": str(e)},
            )
            raise PresignRequestError(f"Failed to create upload: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_success and body.get("success") and body.get("data"):
            try:
                return PresignedTarget.model_validate(body["data"])
            except ValidationError as e:
                raise PresignRequestError("Invalid presign response", status_code=response.status_code) from e

        message = body.get("error") or body.get("detail") or "Failed to create upload"
        if not isinstance(message, str):
            message = "Failed to create upload"
        logger.info(
            "Presign request refused",
            extra={"file_name": file_name, "status_code": response.status_code, "error": message},
        )
        raise PresignRequestError(message, status_code=response.status_code)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
