"""Client-side upload models."""

import mimetypes
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class UploadStatus(str, Enum):
    """Per-file pipeline status."""

    IDLE = "idle"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class LocalFile:
    """An in-memory file selected for upload."""

    name: str
    content_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: str | Path, content_type: Optional[str] = None) -> "LocalFile":
        """Read a file from disk, guessing its MIME type from the name."""
        path = Path(path)
        if content_type is None:
            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(name=path.name, content_type=content_type, data=path.read_bytes())


@dataclass(frozen=True)
class UploadTask:
    """State of one file's trip through the pipeline.

    Instances are immutable; every transition produces a new task that
    replaces the previous one in the orchestrator's task list. ``key`` is the
    original file name until a presigned target assigns the object key.
    """

    task_id: str
    file: LocalFile = field(repr=False)
    key: str
    status: UploadStatus = UploadStatus.IDLE
    progress: int = 0
    error: Optional[str] = None
    url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @classmethod
    def create(cls, file: LocalFile) -> "UploadTask":
        return cls(task_id=uuid.uuid4().hex, file=file, key=file.name)
