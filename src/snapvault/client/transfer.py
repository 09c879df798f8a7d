"""Direct multipart upload to a presigned storage target."""

import asyncio
import contextlib
import logging
from typing import AsyncIterator, Callable, Optional

import httpx

from snapvault.client.models import LocalFile
from snapvault.core.exceptions import TransferCancelledError, TransferHTTPError, TransferNetworkError
from snapvault.models.upload import PresignedTarget

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

ProgressCallback = Callable[[float], None]


class TransferExecutor:
    """POSTs a file straight to object storage, reporting progress.

    The signed policy fields are sent before the ``file`` field; form-based
    object-store uploads reject a body whose file part comes first.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, chunk_size: int = CHUNK_SIZE):
        self._owns_client = client is None
        # No client-side timeout: the transfer may legitimately take a while
        self._client = client or httpx.AsyncClient(timeout=None)
        self.chunk_size = chunk_size

    def _build_request(
        self, target: PresignedTarget, file: LocalFile, on_progress: Optional[ProgressCallback]
    ) -> httpx.Request:
        # httpx encodes data fields ahead of files
        multipart = self._client.build_request(
            "POST",
            target.upload_url,
            data=dict(target.fields),
            files={"file": (file.name, file.data, file.content_type)},
        )
        content_length = multipart.headers.get("Content-Length")
        total = int(content_length) if content_length else None
        chunk_size = self.chunk_size

        async def body() -> AsyncIterator[bytes]:
            sent = 0
            async for chunk in multipart.stream:
                for offset in range(0, len(chunk), chunk_size):
                    piece = chunk[offset:offset + chunk_size]
                    yield piece
                    sent += len(piece)
                    if total and on_progress:
                        on_progress(sent / total)

        # Content-Length is kept, so the body is not sent chunked
        return httpx.Request("POST", multipart.url, headers=multipart.headers, content=body())

    async def _send(self, request: httpx.Request) -> httpx.Response:
        try:
            return await self._client.send(request)
        except httpx.TransportError as e:
            logger.warning("Upload transport error", extra={"host": request.url.host, "error": str(e)})
            raise TransferNetworkError() from e

    async def upload(
        self,
        target: PresignedTarget,
        file: LocalFile,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        """Upload ``file`` to ``target``.

        Args:
            target: Presigned target for exactly this file
            file: File to send
            on_progress: Called with the fraction of bytes sent (0.0-1.0)
            cancel_event: Setting it aborts the request and closes the connection

        Raises:
            TransferHTTPError: Storage answered with a non-2xx status
            TransferNetworkError: The request never completed
            TransferCancelledError: cancel_event was set before completion
        """
        if cancel_event is not None and cancel_event.is_set():
            raise TransferCancelledError()

        request = self._build_request(target, file, on_progress)
        send = asyncio.ensure_future(self._send(request))

        if cancel_event is None:
            response = await send
        else:
            waiter = asyncio.ensure_future(cancel_event.wait())
            try:
                done, _ = await asyncio.wait({send, waiter}, return_when=asyncio.FIRST_COMPLETED)
            except asyncio.CancelledError:
                send.cancel()
                raise
            finally:
                waiter.cancel()

            if send not in done:
                send.cancel()
                with contextlib.suppress(asyncio.CancelledError, TransferNetworkError):
                    await send
                logger.info("Upload cancelled", extra={"object_key": target.key})
                raise TransferCancelledError()
            response = send.result()

        if not response.is_success:
            logger.warning(
                "Storage rejected upload",
                extra={"object_key": target.key, "status_code": response.status_code},
            )
            raise TransferHTTPError(response.status_code)

        if on_progress:
            on_progress(1.0)
        logger.info("Upload transferred", extra={"object_key": target.key, "size_bytes": file.size})

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
