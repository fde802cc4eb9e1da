"""
Unified configuration for docstore.

Settings loads environment variables (and an optional .env file). Stores and
backends never read Settings directly: they receive a DocumentStoreConfig at
construction time, derived from Settings by DocumentStoreConfig.from_settings().
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from docstore_core.runtime.retry import RetryPolicy

# Determine project root for .env file loading (allows running from any CWD)
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class BackendKind(str, Enum):
    """Blob backend variants."""

    MINIO = "minio"
    LOCAL = "local"
    MEMORY = "memory"


class Settings(BaseSettings):
    """
    Environment-driven settings for docstore.

    Environment variables are loaded from .env file and can be overridden
    by actual environment variables.
    """

    SERVICE_NAME: str = "docstore"
    LOG_LEVEL: str = "INFO"

    # Backend selection
    DOCUMENT_STORE_BACKEND: BackendKind = BackendKind.MINIO
    DOCUMENT_CONTAINER: str = "documents"

    # MinIO Configuration
    MINIO_ENDPOINT: str = "localhost:9000"
    MINIO_ACCESS_KEY: str = "minioadmin"
    MINIO_SECRET_KEY: str = "minioadmin"
    MINIO_SECURE: bool = False
    MINIO_REGION: str | None = None

    # Local filesystem backend
    LOCAL_STORAGE_PATH: str = "/tmp/docstore"

    # Retries for transient backend failures
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_BASE_DELAY: float = 0.5

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        extra="ignore",
    )


class DocumentStoreConfig(BaseModel):
    """
    Explicit configuration value handed to a document store and its backend.

    Attributes:
        backend: Which blob backend variant to use.
        container: Bucket / directory / namespace holding the documents.
        endpoint: MinIO endpoint as host:port.
        access_key: MinIO access key.
        secret_key: MinIO secret key.
        secure: Use TLS when talking to MinIO.
        region: Optional MinIO region.
        local_path: Root directory for the filesystem backend.
        retry: Retry policy applied to every backend primitive.
    """

    backend: BackendKind = BackendKind.MEMORY
    container: str = Field(default="documents", min_length=1)
    endpoint: str = "localhost:9000"
    access_key: str = ""
    secret_key: str = Field(default="", repr=False)
    secure: bool = False
    region: str | None = None
    local_path: str = "/tmp/docstore"
    retry: RetryPolicy = Field(default_factory=RetryPolicy)

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "DocumentStoreConfig":
        """Build a config from Settings (the global instance by default)."""
        source = source or settings
        return cls(
            backend=source.DOCUMENT_STORE_BACKEND,
            container=source.DOCUMENT_CONTAINER,
            endpoint=source.MINIO_ENDPOINT,
            access_key=source.MINIO_ACCESS_KEY,
            secret_key=source.MINIO_SECRET_KEY,
            secure=source.MINIO_SECURE,
            region=source.MINIO_REGION,
            local_path=source.LOCAL_STORAGE_PATH,
            retry=RetryPolicy(
                max_attempts=source.RETRY_MAX_ATTEMPTS,
                base_delay=source.RETRY_BASE_DELAY,
            ),
        )


# Global settings instance
settings = Settings()  # type: ignore
