"""Upload policy checks shared by the client and the server."""

from typing import Iterable, Optional

from snapvault.core.config import settings


def validate_file(
    size: int,
    content_type: str,
    max_size: Optional[int] = None,
    allowed_types: Optional[Iterable[str]] = None,
) -> Optional[str]:
    """Check a file's declared size and MIME type against the upload policy.

    The size check runs first; the first failure is the one reported.

    Args:
        size: Declared size in bytes
        content_type: Declared MIME type
        max_size: Maximum size in bytes (defaults to MAX_UPLOAD_MB)
        allowed_types: Allowed MIME types (defaults to ALLOWED_UPLOAD_MIME_TYPES)

    Returns:
        None if the file is acceptable, otherwise a human-readable reason
    """
    if max_size is None:
        max_size = settings.max_upload_bytes
    allowed = list(allowed_types) if allowed_types is not None else settings.allowed_mime_types

    if size > max_size:
        return f"File size exceeds {max_size / 1024 / 1024:g}MB limit"

    if content_type not in allowed:
        return f"File type {content_type} is not supported. Allowed types: {', '.join(allowed)}"

    return None
