"""
Local filesystem blob backend.

This implementation stores documents on the local filesystem,
useful for development and testing without MinIO.

Layout under base_path:
    <container>/content/<name>        document bytes
    <container>/metadata/<name>.json  user metadata (order)
    <container>/tmp/                  in-flight uploads
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path

from loguru import logger

from docstore_core.config import DocumentStoreConfig
from docstore_core.runtime.errors import (
    ErrorCode,
    TerminalError,
    backend_unavailable,
    not_found,
    write_failed,
)

from .storage_protocol import ORDER_METADATA_KEY, BlobInfo


class LocalBlobBackend:
    """
    File-system based blob backend for local development.

    Provides the same interface as the MinIO backend. Primitives are
    serialised with a lock, so a metadata write never lands on a file
    deleted in between.

    Usage:
        backend = LocalBlobBackend(DocumentStoreConfig(backend="local", local_path="/tmp/docs"))
        backend.put("doc.pdf", content)
    """

    def __init__(self, config: DocumentStoreConfig):
        """
        Initialize local storage.

        Args:
            config: Store configuration; local_path is the root directory and
                container the subdirectory holding this store's documents.
        """
        self.root = Path(config.local_path).resolve() / config.container
        self.content_dir = self.root / "content"
        self.metadata_dir = self.root / "metadata"
        self.tmp_dir = self.root / "tmp"
        self._lock = threading.RLock()

        for directory in (self.content_dir, self.metadata_dir, self.tmp_dir):
            directory.mkdir(parents=True, exist_ok=True)
        logger.info(f"LocalBlobBackend initialized at {self.root}")

    def put(self, key: str, data: bytes) -> None:
        """Write to a temp file then rename over the target."""
        target = self._content_file(key)
        with self._lock:
            try:
                fd, tmp_name = tempfile.mkstemp(dir=self.tmp_dir)
                try:
                    with os.fdopen(fd, "wb") as handle:
                        handle.write(data)
                    os.replace(tmp_name, target)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
                # Overwrite starts without an order, like a fresh blob
                self._metadata_file(key).unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"Failed to write {target}: {e}")
                raise write_failed(key, e) from e

        logger.info(f"Uploaded {key} to {target} ({len(data)} bytes)")

    def delete(self, key: str) -> None:
        target = self._content_file(key)
        with self._lock:
            if not target.is_file():
                raise not_found(key)
            try:
                target.unlink()
                self._metadata_file(key).unlink(missing_ok=True)
            except OSError as e:
                raise backend_unavailable(f"delete '{key}'", e) from e

        logger.info(f"Deleted {target}")

    def list(self) -> list[BlobInfo]:
        with self._lock:
            try:
                files = sorted(p for p in self.content_dir.iterdir() if p.is_file())
                return [
                    BlobInfo(key=p.name, size=p.stat().st_size, metadata=self._read_metadata(p.name))
                    for p in files
                ]
            except OSError as e:
                raise backend_unavailable("list documents", e) from e

    def get_metadata(self, key: str) -> dict[str, str]:
        with self._lock:
            if not self._content_file(key).is_file():
                raise not_found(key)
            return self._read_metadata(key)

    def set_metadata(self, key: str, order: int | None) -> None:
        with self._lock:
            if not self._content_file(key).is_file():
                raise not_found(key)

            metadata = self._read_metadata(key)
            if order is None:
                metadata.pop(ORDER_METADATA_KEY, None)
            else:
                metadata[ORDER_METADATA_KEY] = str(order)

            try:
                self._metadata_file(key).write_text(json.dumps(metadata), encoding="utf-8")
            except OSError as e:
                raise backend_unavailable(f"update order of '{key}'", e) from e

        logger.debug(f"Set order of {key} to {order}")

    def location(self, key: str) -> str:
        return (self.content_dir / key).as_uri()

    def _metadata_file(self, key: str) -> Path:
        return self.metadata_dir / f"{key}.json"

    def _read_metadata(self, key: str) -> dict[str, str]:
        path = self._metadata_file(key)
        if not path.exists():
            return {}
        try:
            metadata = json.loads(path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning(f"Ignoring unreadable metadata file {path}")
            return {}
        if not isinstance(metadata, dict):
            logger.warning(f"Ignoring malformed metadata file {path}")
            return {}
        return metadata

    def _content_file(self, key: str) -> Path:
        if not key or key in (".", "..") or "/" in key or "\\" in key:
            raise TerminalError(
                code=ErrorCode.VALIDATION_FAILED,
                message_safe=f"'{key}' is not a valid document name",
            )
        return self.content_dir / key
