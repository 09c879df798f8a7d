"""Sequences validation, presign and transfer for a batch of files."""

import asyncio
import inspect
import logging
from dataclasses import replace
from typing import Any, Callable, Iterable, Optional

import httpx

from snapvault.client.models import LocalFile, UploadStatus, UploadTask
from snapvault.client.presign import PresignClient, Presigner
from snapvault.client.transfer import TransferExecutor
from snapvault.core.config import settings
from snapvault.core.exceptions import SnapVaultError, TransferCancelledError
from snapvault.services.dimensions import safe_extract_image_dimensions
from snapvault.services.validation import validate_file

logger = logging.getLogger(__name__)

TaskCallback = Callable[[UploadTask], Any]
ChangeCallback = Callable[[tuple[UploadTask, ...]], Any]


async def _notify(callback: Optional[Callable[..., Any]], *args: Any) -> None:
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class UploadOrchestrator:
    """Runs each file of a batch through the upload pipeline, one at a time.

    Per file: validate, extract dimensions (best effort), request a presigned
    target, transfer. A failing file ends in ``error`` and the batch moves on
    to the next one. Batches submitted concurrently wait for each other.

    The task list is replaced wholesale on every change, so a snapshot read
    from ``tasks`` is always internally consistent.
    """

    def __init__(
        self,
        presigner: Presigner,
        transfer: TransferExecutor,
        on_upload_complete: Optional[TaskCallback] = None,
        on_upload_error: Optional[TaskCallback] = None,
        on_change: Optional[ChangeCallback] = None,
    ):
        self.presigner = presigner
        self.transfer = transfer
        self.on_upload_complete = on_upload_complete
        self.on_upload_error = on_upload_error
        self.on_change = on_change
        self._tasks: tuple[UploadTask, ...] = ()
        self._batch_lock = asyncio.Lock()
        self._cancel_event = asyncio.Event()
        self._closed = False

    @classmethod
    def for_server(cls, base_url: Optional[str] = None, **callbacks: Any) -> "UploadOrchestrator":
        """Build an orchestrator talking to a SnapVault server over HTTP.

        ``base_url`` defaults to the API_BASE_URL setting.
        """
        return cls(PresignClient(base_url or settings.API_BASE_URL), TransferExecutor(), **callbacks)

    @property
    def tasks(self) -> tuple[UploadTask, ...]:
        """Snapshot of every tracked task, in submission order."""
        return self._tasks

    def _find(self, task_id: str) -> Optional[UploadTask]:
        for task in self._tasks:
            if task.task_id == task_id:
                return task
        return None

    def _publish(self, tasks: tuple[UploadTask, ...]) -> None:
        self._tasks = tasks
        if self.on_change is not None:
            self.on_change(tasks)

    def _update(self, task: UploadTask, **changes: Any) -> UploadTask:
        """Apply changes to the latest state of ``task`` and publish it.

        Tasks dropped by reset() are updated locally but not re-added.
        """
        current = self._find(task.task_id)
        updated = replace(current or task, **changes)
        if current is not None:
            self._publish(tuple(updated if t.task_id == task.task_id else t for t in self._tasks))
        return updated

    def _on_progress(self, task: UploadTask, fraction: float) -> None:
        current = self._find(task.task_id)
        if current is None or current.status != UploadStatus.UPLOADING:
            return
        percent = max(0, min(100, round(fraction * 100)))
        if percent > current.progress:
            self._update(current, progress=percent)

    async def upload_files(self, files: Iterable[LocalFile]) -> list[UploadTask]:
        """Queue files as idle tasks and process them in order.

        Returns:
            The terminal state of each submitted task
        """
        if self._closed:
            raise RuntimeError("UploadOrchestrator is closed")

        batch = [UploadTask.create(file) for file in files]
        self._publish(self._tasks + tuple(batch))

        results = []
        async with self._batch_lock:
            self._cancel_event.clear()
            for task in batch:
                results.append(await self._process(task))
        return results

    async def _process(self, task: UploadTask) -> UploadTask:
        file = task.file

        if self._closed or self._cancel_event.is_set():
            return await self._fail(task, TransferCancelledError().args[0])

        reason = validate_file(file.size, file.content_type)
        if reason:
            logger.info("File rejected before upload", extra={"file_name": file.name, "reason": reason})
            return self._update(task, status=UploadStatus.ERROR, error=reason)

        task = self._update(task, status=UploadStatus.UPLOADING, error=None)

        try:
            dimensions = None
            if file.content_type.startswith("image/"):
                dimensions = await safe_extract_image_dimensions(file.data)

            target = await self.presigner.create_presigned_upload(
                file_name=file.name,
                content_type=file.content_type,
                file_size=file.size,
                dimensions=dimensions,
            )
            task = self._update(task, key=target.key)

            await self.transfer.upload(
                target,
                file,
                on_progress=lambda fraction: self._on_progress(task, fraction),
                cancel_event=self._cancel_event,
            )
        except Exception as e:
            if not isinstance(e, (SnapVaultError, httpx.HTTPError)):
                logger.error(
                    "Unexpected upload failure",
                    extra={"object_key": task.key, "error_type": type(e).__name__},
                    exc_info=True,
                )
            return await self._fail(task, str(e) or "Upload failed")

        task = self._update(
            task,
            status=UploadStatus.SUCCESS,
            progress=100,
            url=target.public_url,
            width=dimensions.width if dimensions else None,
            height=dimensions.height if dimensions else None,
            error=None,
        )
        logger.info("Upload succeeded", extra={"object_key": task.key, "size_bytes": file.size})
        await _notify(self.on_upload_complete, task)
        return task

    async def _fail(self, task: UploadTask, message: str) -> UploadTask:
        task = self._update(task, status=UploadStatus.ERROR, error=message)
        logger.warning("Upload failed", extra={"object_key": task.key, "error": message})
        await _notify(self.on_upload_error, task)
        return task

    def reset(self) -> None:
        """Forget every task. Transfers already in flight keep running."""
        self._publish(())

    def cancel(self) -> None:
        """Abort the running batch: the in-flight transfer and every file not yet started."""
        self._cancel_event.set()

    async def aclose(self) -> None:
        """Cancel outstanding work and close the HTTP clients."""
        self._closed = True
        self.cancel()
        # Let the running batch observe the cancellation before clients close
        async with self._batch_lock:
            pass
        await self.transfer.aclose()
        presigner_close = getattr(self.presigner, "aclose", None)
        if presigner_close is not None:
            await presigner_close()

    async def __aenter__(self) -> "UploadOrchestrator":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
