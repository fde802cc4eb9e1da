"""
Blob backend protocol for document persistence.

This module defines the small capability interface every blob backend
implements, enabling MinIO, local filesystem and in-memory variants to be
used interchangeably by the document store.

Failures are raised as ServiceError subclasses:
- TerminalError(NOT_FOUND) when the key does not exist
- TerminalError(WRITE_FAILED) when a write is rejected
- RetryableError(BACKEND_UNAVAILABLE) on transport/connectivity faults
"""

from typing import NamedTuple, Protocol, runtime_checkable

# User-metadata entry holding a document's listing position
ORDER_METADATA_KEY = "order"


class BlobInfo(NamedTuple):
    """One object as reported by a backend listing."""

    key: str
    size: int
    metadata: dict[str, str]


@runtime_checkable
class BlobBackend(Protocol):
    """
    Abstract blob storage interface keyed by document name.

    All primitives are blocking; the document store runs them off the
    event loop.
    """

    def put(self, key: str, data: bytes) -> None:
        """
        Write data under key, replacing any existing object and its metadata.

        The write is atomic: on failure the previous object is untouched.
        """
        ...

    def delete(self, key: str) -> None:
        """
        Remove the object stored under key.

        Raises:
            TerminalError: NOT_FOUND when nothing is stored under key.
        """
        ...

    def list(self) -> list[BlobInfo]:
        """
        Enumerate every object in the container, in backend order.

        Returns:
            list: BlobInfo entries with size and user metadata.
        """
        ...

    def get_metadata(self, key: str) -> dict[str, str]:
        """
        Return the user metadata of the object stored under key.

        Raises:
            TerminalError: NOT_FOUND when nothing is stored under key.
        """
        ...

    def set_metadata(self, key: str, order: int | None) -> None:
        """
        Persist the order value of an existing object (None clears it).

        Existence is checked as part of the write itself.

        Raises:
            TerminalError: NOT_FOUND when nothing is stored under key.
        """
        ...

    def location(self, key: str) -> str:
        """Return the absolute URI of the object stored under key."""
        ...


def parse_order(metadata: dict[str, str]) -> int | None:
    """Read the order entry from user metadata, ignoring malformed values."""
    for meta_key, value in metadata.items():
        if meta_key.lower() == ORDER_METADATA_KEY:
            try:
                return int(value)
            except (TypeError, ValueError):
                return None
    return None
