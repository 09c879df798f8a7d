"""Upload record tracking store."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional


class UploadStatus(str, Enum):
    """Upload status enumeration."""

    PENDING = "pending"  # Target issued, awaiting direct upload
    COMPLETED = "completed"  # Object verified in storage


@dataclass
class UploadRecord:
    """Upload record metadata."""

    key: str
    file_name: str
    content_type: str
    size_bytes: int
    storage_backend: str
    status: UploadStatus
    created_at: datetime
    completed_at: Optional[datetime] = None


class UploadStore:
    """In-memory store for upload records, keyed by object key."""

    def __init__(self):
        self._uploads: Dict[str, UploadRecord] = {}

    def create(self, record: UploadRecord) -> None:
        """Store a new upload record."""
        self._uploads[record.key] = record

    def get(self, key: str) -> Optional[UploadRecord]:
        """Retrieve an upload record by object key."""
        return self._uploads.get(key)

    def mark_completed(self, key: str, completed_at: datetime) -> Optional[UploadRecord]:
        """Move a record to COMPLETED; returns None for unknown keys."""
        record = self._uploads.get(key)
        if record is None:
            return None
        record.status = UploadStatus.COMPLETED
        record.completed_at = completed_at
        return record

    def list_all(self) -> list[UploadRecord]:
        """List all upload records."""
        return list(self._uploads.values())

    def prune_pending(self, older_than: datetime) -> int:
        """Drop PENDING records created before ``older_than``.

        Returns:
            Number of records removed
        """
        stale = [
            key
            for key, record in self._uploads.items()
            if record.status == UploadStatus.PENDING and record.created_at < older_than
        ]
        for key in stale:
            del self._uploads[key]
        return len(stale)
