"""Upload data models."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from snapvault.models.image import CamelModel, ImageDimensions


class PresignRequest(CamelModel):
    """Request model for issuing a presigned upload target."""

    file_name: str
    file_type: str
    file_size: int = Field(..., ge=0)
    dimensions: Optional[ImageDimensions] = None


class PresignedTarget(CamelModel):
    """A short-lived authorization to POST one specific key."""

    key: str
    upload_url: str
    public_url: str
    width: Optional[int] = None
    height: Optional[int] = None
    fields: dict[str, str]
    expires_at: datetime


class PresignResponse(CamelModel):
    """Successful presign envelope."""

    success: Literal[True] = True
    data: PresignedTarget


class ErrorResponse(CamelModel):
    """Failure envelope shared by the upload endpoints."""

    success: Literal[False] = False
    error: str


class CompleteUploadRequest(CamelModel):
    """Request model for confirming a direct upload."""

    key: str


class UploadResponse(CamelModel):
    """Response model for a server-side upload."""

    key: str
    url: str
    dimensions: Optional[ImageDimensions] = None
