"""
Direct-upload client.

Validates files locally, obtains a presigned target from a SnapVault server
and sends the bytes straight to object storage with progress reporting.
"""

from snapvault.client.models import LocalFile, UploadStatus, UploadTask
from snapvault.client.orchestrator import UploadOrchestrator
from snapvault.client.presign import PresignClient, Presigner
from snapvault.client.transfer import TransferExecutor

__all__ = [
    "LocalFile",
    "UploadStatus",
    "UploadTask",
    "UploadOrchestrator",
    "PresignClient",
    "Presigner",
    "TransferExecutor",
]
