"""
In-memory blob backend.

Keeps documents in a dict, enumerated in insertion order. Intended for
tests and ephemeral single-process use.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from urllib.parse import quote

from docstore_core.config import DocumentStoreConfig
from docstore_core.runtime.errors import not_found

from .storage_protocol import ORDER_METADATA_KEY, BlobInfo


@dataclass
class _StoredBlob:
    data: bytes
    metadata: dict[str, str] = field(default_factory=dict)


class InMemoryBlobBackend:
    """Dict-backed BlobBackend; every primitive holds the same lock."""

    def __init__(self, config: DocumentStoreConfig | None = None):
        self.container = config.container if config else "documents"
        self._blobs: dict[str, _StoredBlob] = {}
        self._lock = threading.Lock()

    def put(self, key: str, data: bytes) -> None:
        with self._lock:
            self._blobs[key] = _StoredBlob(data=bytes(data))

    def delete(self, key: str) -> None:
        with self._lock:
            if key not in self._blobs:
                raise not_found(key)
            del self._blobs[key]

    def list(self) -> list[BlobInfo]:
        with self._lock:
            return [
                BlobInfo(key=key, size=len(blob.data), metadata=dict(blob.metadata))
                for key, blob in self._blobs.items()
            ]

    def get_metadata(self, key: str) -> dict[str, str]:
        with self._lock:
            if key not in self._blobs:
                raise not_found(key)
            return dict(self._blobs[key].metadata)

    def set_metadata(self, key: str, order: int | None) -> None:
        with self._lock:
            if key not in self._blobs:
                raise not_found(key)
            metadata = self._blobs[key].metadata
            if order is None:
                metadata.pop(ORDER_METADATA_KEY, None)
            else:
                metadata[ORDER_METADATA_KEY] = str(order)

    def location(self, key: str) -> str:
        return f"memory://{self.container}/{quote(key)}"

    def read(self, key: str) -> bytes:
        """Return stored bytes (used by tests to check overwrites)."""
        with self._lock:
            if key not in self._blobs:
                raise not_found(key)
            return self._blobs[key].data
