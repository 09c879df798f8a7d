"""Pytest configuration and shared fixtures."""

import io
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from snapvault.storage.base import PresignedPost, StorageBackend


@pytest.fixture
def make_image_bytes():
    """Factory producing encoded images of a given size and format."""

    def _make(width: int = 800, height: int = 600, fmt: str = "PNG") -> bytes:
        buffer = io.BytesIO()
        Image.new("RGB", (width, height), color=(200, 30, 30)).save(buffer, format=fmt)
        return buffer.getvalue()

    return _make


@pytest.fixture
def mock_backend():
    """Storage backend double with async methods mocked."""
    backend = MagicMock(spec=StorageBackend)
    backend.get_backend_name.return_value = "gcs"
    backend.public_url.side_effect = lambda key: f"https://cdn.example.com/{key}"
    backend.create_presigned_post = AsyncMock(
        return_value=PresignedPost(
            url="https://storage.googleapis.com/test-bucket/",
            fields={"key": "signed-key", "policy": "c2lnbmVk", "Content-Type": "image/png"},
        )
    )
    backend.store_file = AsyncMock(side_effect=lambda key, content_type, data: f"https://cdn.example.com/{key}")
    backend.list_objects = AsyncMock(return_value=[])
    backend.object_exists = AsyncMock(return_value=True)
    return backend
