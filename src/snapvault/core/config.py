"""Configuration management for SnapVault."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    ENV: str = "local"
    SERVICE_NAME: str = "snapvault"
    SERVICE_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # GCP Configuration
    GCP_PROJECT_ID: str = ""

    # Storage Configuration
    STORAGE_BACKEND: str = "gcs"
    GCS_BUCKET_NAME: str = ""
    PUBLIC_BASE_URL: str = ""  # Empty = https://storage.googleapis.com/{bucket}

    # Upload Constraints (shared by client validation and server re-validation)
    MAX_UPLOAD_MB: int = 10
    ALLOWED_UPLOAD_MIME_TYPES: str = "image/jpeg,image/jpg,image/png,image/gif,image/webp"
    PRESIGN_EXPIRES_SECONDS: int = 60  # Lifetime of an issued upload policy

    # Gallery
    IMAGE_LIST_PAGE_SIZE: int = 12

    # Client
    API_BASE_URL: str = "http://localhost:8000"

    @property
    def allowed_mime_types(self) -> list[str]:
        """Parse ALLOWED_UPLOAD_MIME_TYPES into a list."""
        return [mt.strip() for mt in self.ALLOWED_UPLOAD_MIME_TYPES.split(",") if mt.strip()]

    @property
    def max_upload_bytes(self) -> int:
        """Convert MAX_UPLOAD_MB to bytes."""
        return self.MAX_UPLOAD_MB * 1024 * 1024

    @property
    def public_base_url(self) -> str:
        """Base URL objects are publicly served from, without trailing slash."""
        if self.PUBLIC_BASE_URL:
            return self.PUBLIC_BASE_URL.rstrip("/")
        return f"https://storage.googleapis.com/{self.GCS_BUCKET_NAME}"


# Singleton settings instance
settings = Settings()
