"""Image dimension extraction."""

import asyncio
import io
import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError

from snapvault.core.exceptions import DimensionExtractionError
from snapvault.models.image import ImageDimensions

logger = logging.getLogger(__name__)


def _read_size(data: bytes) -> ImageDimensions:
    try:
        with Image.open(io.BytesIO(data)) as image:
            width, height = image.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise DimensionExtractionError(f"Unable to read image dimensions: {e}") from e

    if not width or not height:
        raise DimensionExtractionError("Unable to read image dimensions")
    return ImageDimensions(width=width, height=height)


async def extract_image_dimensions(data: bytes) -> ImageDimensions:
    """Decode image headers off the event loop and return width/height.

    Raises:
        DimensionExtractionError: If the data is not a decodable image
    """
    return await asyncio.to_thread(_read_size, data)


async def safe_extract_image_dimensions(data: bytes) -> Optional[ImageDimensions]:
    """Like extract_image_dimensions, but returns None instead of raising."""
    try:
        return await extract_image_dimensions(data)
    except DimensionExtractionError as e:
        logger.debug("Dimension extraction skipped", extra={"error": str(e)})
        return None
