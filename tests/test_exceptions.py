"""Smoke tests for SnapVault exceptions."""

import pytest

from snapvault.core.exceptions import (
    DimensionExtractionError,
    PresignError,
    PresignRequestError,
    PresignSigningError,
    PresignValidationError,
    SnapVaultError,
    StorageError,
    TransferCancelledError,
    TransferError,
    TransferHTTPError,
    TransferNetworkError,
)


def test_exception_hierarchy():
    """Test that all exceptions inherit from SnapVaultError."""
    for exc in (DimensionExtractionError, StorageError, PresignError, TransferError):
        assert issubclass(exc, SnapVaultError)
    for exc in (PresignValidationError, PresignSigningError, PresignRequestError):
        assert issubclass(exc, PresignError)
    for exc in (TransferHTTPError, TransferNetworkError, TransferCancelledError):
        assert issubclass(exc, TransferError)


def test_transfer_http_error_message():
    error = TransferHTTPError(503)

    assert error.status_code == 503
    assert str(error) == "Upload failed (503)"


def test_default_messages():
    assert str(TransferNetworkError()) == "Upload failed: network error"
    assert str(TransferCancelledError()) == "Upload cancelled"


def test_presign_request_error_carries_status():
    with pytest.raises(PresignError) as exc_info:
        raise PresignRequestError("refused", status_code=400)

    assert exc_info.value.status_code == 400
