"""Tests for upload API routes."""

import io
import re

import pytest
from fastapi.testclient import TestClient

from snapvault.api.v1.dependencies import get_storage_backend, get_upload_store
from snapvault.core.exceptions import StorageError
from snapvault.main import app
from snapvault.storage.base import ObjectInfo
from snapvault.storage.upload_store import UploadStatus, UploadStore

MB = 1024 * 1024


@pytest.fixture
def upload_store():
    return UploadStore()


@pytest.fixture
def client(mock_backend, upload_store):
    """Create test client wired to the mocked backend."""
    app.dependency_overrides[get_storage_backend] = lambda: mock_backend
    app.dependency_overrides[get_upload_store] = lambda: upload_store
    yield TestClient(app)
    app.dependency_overrides.clear()


def presign_payload(**overrides):
    payload = {
        "fileName": "cat.png",
        "fileType": "image/png",
        "fileSize": 2 * MB,
        "dimensions": {"width": 800, "height": 600},
    }
    payload.update(overrides)
    return payload


def test_presign_success(client, mock_backend, upload_store):
    response = client.post("/api/v1/uploads/presign", json=presign_payload())

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert re.match(r"^uploads/[0-9a-f-]+_800x600\.png$", data["key"])
    assert data["uploadUrl"] == "https://storage.googleapis.com/test-bucket/"
    assert data["publicUrl"] == f"https://cdn.example.com/{data['key']}"
    assert data["width"] == 800
    assert data["height"] == 600
    assert data["fields"]["policy"] == "c2lnbmVk"
    assert "expiresAt" in data
    assert upload_store.get(data["key"]).status == UploadStatus.PENDING


def test_presign_null_dimensions(client):
    response = client.post("/api/v1/uploads/presign", json=presign_payload(dimensions=None))

    data = response.json()["data"]
    assert data["key"].endswith("_0x0.png")
    assert data["width"] is None


def test_presign_rejects_disallowed_type(client, mock_backend):
    response = client.post(
        "/api/v1/uploads/presign", json=presign_payload(fileName="x.svg", fileType="image/svg+xml")
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "not supported" in response.json()["error"]
    mock_backend.create_presigned_post.assert_not_awaited()


def test_presign_rejects_oversized_file(client):
    response = client.post("/api/v1/uploads/presign", json=presign_payload(fileSize=15 * MB))

    assert response.status_code == 400
    assert "10MB" in response.json()["error"]


def test_presign_rejects_negative_dimensions(client, mock_backend, upload_store):
    response = client.post(
        "/api/v1/uploads/presign", json=presign_payload(dimensions={"width": -5, "height": 3})
    )

    assert response.status_code == 422
    mock_backend.create_presigned_post.assert_not_awaited()
    assert upload_store.list_all() == []


def test_presign_signing_failure(client, mock_backend):
    mock_backend.create_presigned_post.side_effect = StorageError("signBlob denied")

    response = client.post("/api/v1/uploads/presign", json=presign_payload())

    assert response.status_code == 502
    assert response.json() == {"success": False, "error": "Failed to create upload: signBlob denied"}


def test_complete_upload(client, mock_backend, upload_store):
    key = client.post("/api/v1/uploads/presign", json=presign_payload()).json()["data"]["key"]

    response = client.post("/api/v1/uploads/complete", json={"key": key})

    assert response.status_code == 200
    body = response.json()
    assert body["key"] == key
    assert body["dimensions"] == {"width": 800, "height": 600}
    assert body["size"] == 2 * MB
    assert upload_store.get(key).status == UploadStatus.COMPLETED
    mock_backend.object_exists.assert_awaited_once_with(key)


def test_complete_unknown_key(client):
    response = client.post("/api/v1/uploads/complete", json={"key": "uploads/abc_0x0.png"})

    assert response.status_code == 404


def test_complete_missing_object(client, mock_backend):
    key = client.post("/api/v1/uploads/presign", json=presign_payload()).json()["data"]["key"]
    mock_backend.object_exists.return_value = False

    response = client.post("/api/v1/uploads/complete", json={"key": key})

    assert response.status_code == 409
    assert "does not exist" in response.json()["detail"]


def test_direct_upload(client, mock_backend, upload_store, make_image_bytes):
    content = make_image_bytes(64, 48)
    files = {"file": ("pic.png", io.BytesIO(content), "image/png")}

    response = client.post("/api/v1/uploads", files=files)

    assert response.status_code == 201
    body = response.json()
    assert body["key"].endswith("_64x48.png")
    assert body["dimensions"] == {"width": 64, "height": 48}
    assert body["url"] == f"https://cdn.example.com/{body['key']}"
    mock_backend.store_file.assert_awaited_once()
    assert upload_store.get(body["key"]).status == UploadStatus.COMPLETED


def test_direct_upload_undecodable_image_has_no_dimensions(client):
    files = {"file": ("broken.jpg", io.BytesIO(b"not really a jpeg"), "image/jpeg")}

    response = client.post("/api/v1/uploads", files=files)

    assert response.status_code == 201
    assert response.json()["key"].endswith("_0x0.jpg")
    assert response.json()["dimensions"] is None


def test_direct_upload_invalid_type(client, mock_backend):
    files = {"file": ("notes.txt", io.BytesIO(b"hello"), "text/plain")}

    response = client.post("/api/v1/uploads", files=files)

    assert response.status_code == 400
    assert "not supported" in response.json()["detail"]
    mock_backend.store_file.assert_not_awaited()


def test_direct_upload_storage_failure(client, mock_backend, make_image_bytes):
    mock_backend.store_file.side_effect = StorageError("quota")
    files = {"file": ("pic.png", io.BytesIO(make_image_bytes(4, 4)), "image/png")}

    response = client.post("/api/v1/uploads", files=files)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to store file"


def test_list_uploads_includes_non_images(client, mock_backend):
    mock_backend.list_objects.return_value = [
        ObjectInfo(key="uploads/a_100x200.png"),
        ObjectInfo(key="uploads/b_0x0.bin"),
    ]

    response = client.get("/api/v1/uploads")

    assert response.status_code == 200
    dims = {item["key"]: item["dimensions"] for item in response.json()["images"]}
    assert dims == {
        "uploads/a_100x200.png": {"width": 100, "height": 200},
        "uploads/b_0x0.bin": None,
    }
