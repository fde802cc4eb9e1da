# Document store services

from .document_store import BlobDocumentStore, DocumentStore, sort_by_order
from .local_storage import LocalBlobBackend
from .memory_storage import InMemoryBlobBackend
from .storage import MinIOBlobBackend
from .storage_protocol import ORDER_METADATA_KEY, BlobBackend, BlobInfo, parse_order

__all__ = [
    # Store
    "DocumentStore",
    "BlobDocumentStore",
    "sort_by_order",
    # Blob backends
    "BlobBackend",
    "BlobInfo",
    "MinIOBlobBackend",
    "LocalBlobBackend",
    "InMemoryBlobBackend",
    "ORDER_METADATA_KEY",
    "parse_order",
]
