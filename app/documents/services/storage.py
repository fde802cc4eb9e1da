"""
MinIO blob backend for document persistence.

This module provides MinIOBlobBackend, the production BlobBackend. Every
document is one object in the configured bucket, keyed by document name;
the listing position lives in the object's user metadata.

The bucket itself is provisioned outside docstore.
"""

from __future__ import annotations

import io
from contextlib import contextmanager
from typing import Iterator
from urllib.parse import quote

from loguru import logger
from minio import Minio
from minio.commonconfig import REPLACE, CopySource
from minio.error import MinioException, S3Error
from urllib3.exceptions import HTTPError

from docstore_core.config import DocumentStoreConfig
from docstore_core.infrastructure.minio import get_minio_client
from docstore_core.runtime.errors import (
    ErrorCode,
    TerminalError,
    backend_unavailable,
    not_found,
    write_failed,
)

from .storage_protocol import ORDER_METADATA_KEY, BlobInfo

USER_METADATA_PREFIX = "x-amz-meta-"
NOT_FOUND_CODES = frozenset({"NoSuchKey", "NoSuchObject", "NoSuchVersion", "ResourceNotFound"})


class MinIOBlobBackend:
    """
    MinIO-based blob backend.

    Implements the BlobBackend protocol on top of a single bucket.

    Usage:
        backend = MinIOBlobBackend(config)
        backend.put("report.pdf", content)
        backend.set_metadata("report.pdf", 3)
    """

    def __init__(self, config: DocumentStoreConfig, client: Minio | None = None):
        """
        Initialize the MinIO backend.

        Args:
            config: Store configuration (endpoint, credentials, bucket).
            client: Optional pre-built client, otherwise the cached one is used.
        """
        self._client = client or get_minio_client(config)
        self.bucket = config.container
        self._base_url = f"{'https' if config.secure else 'http'}://{config.endpoint}"

    @contextmanager
    def _translate_errors(
        self, action: str, key: str | None = None, write: bool = False
    ) -> Iterator[None]:
        """Map MinIO SDK and transport errors onto ServiceErrors."""
        try:
            yield
        except S3Error as e:
            if key is not None and e.code in NOT_FOUND_CODES:
                raise not_found(key, e) from e
            if write and key is not None:
                raise write_failed(key, e) from e
            logger.error(f"MinIO rejected request to {action}: {e.code} {e.message}")
            raise TerminalError(
                code=ErrorCode.BACKEND_UNAVAILABLE,
                message_safe=f"Blob backend rejected request to {action}",
                message_debug=str(e),
                cause=e,
            ) from e
        except (MinioException, HTTPError, OSError) as e:
            logger.warning(f"MinIO unreachable while trying to {action}: {e}")
            raise backend_unavailable(action, e) from e

    def put(self, key: str, data: bytes) -> None:
        """Upload data to the bucket, replacing any existing object."""
        logger.info(f"Uploading document to {self.bucket}/{key} ({len(data)} bytes)")

        with self._translate_errors(f"upload '{key}'", key, write=True):
            self._client.put_object(
                bucket_name=self.bucket,
                object_name=key,
                data=io.BytesIO(data),
                length=len(data),
            )

    def delete(self, key: str) -> None:
        """Remove an object; S3 deletes are silent, so existence is checked first."""
        with self._translate_errors(f"delete '{key}'", key):
            self._client.stat_object(bucket_name=self.bucket, object_name=key)
            logger.info(f"Deleting {self.bucket}/{key}")
            self._client.remove_object(bucket_name=self.bucket, object_name=key)

    def list(self) -> list[BlobInfo]:
        """List every object in the bucket with its size and user metadata."""
        with self._translate_errors("list documents"):
            keys = [
                obj.object_name
                for obj in self._client.list_objects(bucket_name=self.bucket, recursive=True)
                if not obj.is_dir
            ]

        infos = []
        for key in keys:
            try:
                stat = self._stat(key)
            except TerminalError as e:
                if e.code != ErrorCode.NOT_FOUND:
                    raise
                # Deleted between list and stat
                logger.debug(f"Skipping {self.bucket}/{key}: removed during listing")
                continue
            infos.append(BlobInfo(key=key, size=stat.size, metadata=_user_metadata(stat.metadata)))

        return infos

    def get_metadata(self, key: str) -> dict[str, str]:
        """Return the user metadata of one object."""
        return _user_metadata(self._stat(key).metadata)

    def set_metadata(self, key: str, order: int | None) -> None:
        """
        Rewrite the order metadata with a server-side self-copy.

        Copying a source that no longer exists fails with NoSuchKey, so a
        concurrent delete surfaces as NOT_FOUND instead of a ghost write.
        """
        metadata = {}
        if order is not None:
            metadata[f"{USER_METADATA_PREFIX}{ORDER_METADATA_KEY}"] = str(order)

        logger.debug(f"Setting order of {self.bucket}/{key} to {order}")
        with self._translate_errors(f"update order of '{key}'", key):
            self._client.copy_object(
                bucket_name=self.bucket,
                object_name=key,
                source=CopySource(bucket_name=self.bucket, object_name=key),
                metadata=metadata,
                metadata_directive=REPLACE,
            )

    def location(self, key: str) -> str:
        return f"{self._base_url}/{self.bucket}/{quote(key)}"

    def _stat(self, key: str):
        with self._translate_errors(f"read metadata of '{key}'", key):
            return self._client.stat_object(bucket_name=self.bucket, object_name=key)


def _user_metadata(headers) -> dict[str, str]:
    """Extract x-amz-meta-* entries from response headers, prefix stripped."""
    if not headers:
        return {}
    metadata = {}
    for name, value in headers.items():
        lowered = name.lower()
        if lowered.startswith(USER_METADATA_PREFIX):
            metadata[lowered[len(USER_METADATA_PREFIX):]] = value
    return metadata
