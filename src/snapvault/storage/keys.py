"""Object key format shared by the key builder and the key parser.

Keys look like ``uploads/<uuid>_<width>x<height>.<ext>``. Width and height
are ``0`` when the dimensions are unknown, which lets the gallery recover
dimensions from a listing without fetching per-object metadata.
"""

import re
import uuid
from typing import Optional

from snapvault.models.image import ImageDimensions

OBJECT_KEY_PREFIX = "uploads"
FALLBACK_EXTENSION = "bin"
OBJECT_KEY_TEMPLATE = OBJECT_KEY_PREFIX + "/{id}_{width}x{height}.{ext}"
OBJECT_KEY_PATTERN = re.compile(
    rf"^{OBJECT_KEY_PREFIX}/(?P<id>[0-9a-fA-F-]+)_(?P<width>\d+)x(?P<height>\d+)\.(?P<ext>[a-z0-9]+)$"
)


def sanitize_extension(file_name: str) -> str:
    """Return the lowercase alphanumeric extension of a file name, or ''.

    A leading dot does not start an extension (".env" has none).
    """
    last_dot = file_name.rfind(".")
    ext = file_name[last_dot + 1:] if last_dot > 0 else ""
    return re.sub(r"[^a-z0-9]", "", ext.lower())


def build_object_key(file_name: str, dimensions: Optional[ImageDimensions] = None) -> str:
    """Build a fresh, unique object key for an upload.

    Every call draws a new uuid4, so identical inputs never collide.
    """
    return OBJECT_KEY_TEMPLATE.format(
        id=uuid.uuid4(),
        width=dimensions.width if dimensions else 0,
        height=dimensions.height if dimensions else 0,
        ext=sanitize_extension(file_name) or FALLBACK_EXTENSION,
    )


def parse_dimensions_from_key(key: str, strict: bool = True) -> Optional[ImageDimensions]:
    """Recover image dimensions encoded in an object key.

    Args:
        key: Object key to parse
        strict: Treat non-positive dimensions (the ``0x0`` sentinel) as unknown

    Returns:
        Parsed dimensions, or None if the key does not carry usable ones
    """
    match = OBJECT_KEY_PATTERN.match(key)
    if not match:
        return None

    width = int(match.group("width"))
    height = int(match.group("height"))

    if strict and (width <= 0 or height <= 0):
        return None

    return ImageDimensions(width=width, height=height)


def key_extension(key: str) -> str:
    """Return the lowercase extension of a key (text after the last dot)."""
    _, dot, ext = key.rpartition(".")
    return ext.lower() if dot else ""
