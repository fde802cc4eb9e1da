"""
Factory for creating document store components.

The backend variant is picked from DocumentStoreConfig.backend; callers
that pass no config get one derived from the environment settings.
"""

from __future__ import annotations

from loguru import logger

from app.documents.services.document_store import BlobDocumentStore, DocumentStore
from app.documents.services.storage_protocol import BlobBackend
from docstore_core.config import BackendKind, DocumentStoreConfig


def get_blob_backend(config: DocumentStoreConfig) -> BlobBackend:
    """
    Build the blob backend named by config.backend.

    Args:
        config: Store configuration.

    Returns:
        BlobBackend: The configured backend instance.
    """
    if config.backend == BackendKind.LOCAL:
        from app.documents.services.local_storage import LocalBlobBackend

        logger.info("Using LocalBlobBackend")
        return LocalBlobBackend(config)
    if config.backend == BackendKind.MEMORY:
        from app.documents.services.memory_storage import InMemoryBlobBackend

        logger.info("Using InMemoryBlobBackend")
        return InMemoryBlobBackend(config)

    from app.documents.services.storage import MinIOBlobBackend

    logger.info(f"Using MinIOBlobBackend (bucket '{config.container}')")
    return MinIOBlobBackend(config)


def get_document_store(config: DocumentStoreConfig | None = None) -> DocumentStore:
    """
    Create a fully configured DocumentStore.

    Args:
        config: Explicit configuration; defaults to DocumentStoreConfig.from_settings().
    """
    config = config or DocumentStoreConfig.from_settings()
    return BlobDocumentStore(get_blob_backend(config), config)
