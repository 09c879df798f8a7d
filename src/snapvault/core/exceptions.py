"""Custom exceptions for the upload pipeline."""


class SnapVaultError(Exception):
    """Base exception for SnapVault."""
    pass


class DimensionExtractionError(SnapVaultError):
    """Exception raised when image dimensions cannot be decoded."""
    pass


class StorageError(SnapVaultError):
    """Exception raised when storage operations fail."""
    pass


class PresignError(SnapVaultError):
    """Base exception for upload authorization failures."""
    pass


class PresignValidationError(PresignError):
    """Exception raised when a presign request violates the upload policy."""
    pass


class PresignSigningError(PresignError):
    """Exception raised when the storage backend cannot sign a policy."""
    pass


class PresignRequestError(PresignError):
    """Exception raised by the client when the presign endpoint refuses a request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TransferError(SnapVaultError):
    """Base exception for direct-to-storage transfer failures."""
    pass


class TransferHTTPError(TransferError):
    """Exception raised when the storage endpoint answers with a non-2xx status."""

    def __init__(self, status_code: int):
        super().__init__(f"Upload failed ({status_code})")
        self.status_code = status_code


class TransferNetworkError(TransferError):
    """Exception raised when the transfer never completes at the transport level."""

    def __init__(self, message: str = "Upload failed: network error"):
        super().__init__(message)


class TransferCancelledError(TransferError):
    """Exception raised when an in-flight transfer is aborted."""

    def __init__(self, message: str = "Upload cancelled"):
        super().__init__(message)
