"""Tests for image dimension extraction."""

import pytest

from snapvault.core.exceptions import DimensionExtractionError
from snapvault.models.image import ImageDimensions
from snapvault.services.dimensions import extract_image_dimensions, safe_extract_image_dimensions


@pytest.mark.asyncio
@pytest.mark.parametrize("fmt", ["PNG", "JPEG", "GIF", "WEBP"])
async def test_extracts_dimensions(make_image_bytes, fmt):
    data = make_image_bytes(320, 240, fmt)

    assert await extract_image_dimensions(data) == ImageDimensions(width=320, height=240)


@pytest.mark.asyncio
async def test_corrupt_data_raises():
    with pytest.raises(DimensionExtractionError):
        await extract_image_dimensions(b"definitely not an image")


@pytest.mark.asyncio
async def test_safe_variant_returns_none_on_failure():
    assert await safe_extract_image_dimensions(b"\x89PNG garbage") is None


@pytest.mark.asyncio
async def test_safe_variant_passes_through_success(make_image_bytes):
    dims = await safe_extract_image_dimensions(make_image_bytes(12, 34))

    assert dims == ImageDimensions(width=12, height=34)
