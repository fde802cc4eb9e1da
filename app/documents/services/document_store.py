"""
Document store: upload, delete, list and reorder documents over a blob backend.

Every operation returns an OperationResult. Backend faults are caught here
and reported through the envelope; nothing raises past this boundary.
"""

from __future__ import annotations

import asyncio
from typing import Any, BinaryIO, Callable, Protocol, Sequence, runtime_checkable

from loguru import logger

from docstore_core.config import DocumentStoreConfig
from docstore_core.domain import DocumentEntity, OperationResult
from docstore_core.runtime.errors import (
    ErrorCode,
    ServiceError,
    TerminalError,
    backend_unavailable,
)
from docstore_core.runtime.retry import RetryPolicy

from .storage_protocol import BlobBackend, parse_order


@runtime_checkable
class DocumentStore(Protocol):
    """Capability set every document store offers."""

    async def upload(self, name: str, stream: BinaryIO) -> OperationResult[DocumentEntity]:
        """Store stream under name, replacing any existing document."""
        ...

    async def delete(self, name: str) -> OperationResult[None]:
        """Remove a document; fails with NOT_FOUND when it does not exist."""
        ...

    async def get_all(self) -> OperationResult[list[DocumentEntity]]:
        """List every stored document."""
        ...

    async def reorder(
        self, entities: Sequence[DocumentEntity]
    ) -> OperationResult[list[DocumentEntity]]:
        """Apply the order of each entity, all or nothing."""
        ...


class BlobDocumentStore:
    """
    DocumentStore over any BlobBackend.

    The store keeps no state of its own: every call goes to the backend.
    Blocking backend primitives run in a worker thread under the configured
    RetryPolicy, so only RetryableErrors are retried.

    Usage:
        store = BlobDocumentStore(MinIOBlobBackend(config), config)
        result = await store.upload("report.pdf", open("report.pdf", "rb"))
        if result.successful:
            print(result.result.location)
    """

    def __init__(self, backend: BlobBackend, config: DocumentStoreConfig | None = None):
        self._backend = backend
        self._retry: RetryPolicy = config.retry if config else RetryPolicy()

    async def upload(self, name: str, stream: BinaryIO) -> OperationResult[DocumentEntity]:
        """
        Upload a document.

        The stream is read to the end and closed on every path. size is the
        number of bytes written; an overwrite clears any persisted order.
        """
        try:
            try:
                data = await asyncio.to_thread(stream.read)
            except Exception as e:
                logger.exception(f"Could not read content for '{name}'")
                return self._failed(
                    f"upload '{name}'",
                    TerminalError(
                        code=ErrorCode.WRITE_FAILED,
                        message_safe=f"Could not read content for document '{name}'",
                        cause=e,
                    ),
                )
        finally:
            stream.close()

        if not isinstance(data, (bytes, bytearray)):
            return self._failed(
                f"upload '{name}'",
                TerminalError(
                    code=ErrorCode.VALIDATION_FAILED,
                    message_safe="Document content must be a binary stream",
                ),
            )

        created = DocumentEntity.create(name, len(data), self._backend.location(name))
        if not created.successful:
            logger.warning(f"Rejected upload of '{name}': {created.error}")
            return created

        try:
            await self._call(f"upload '{name}'", self._backend.put, name, bytes(data))
        except ServiceError as e:
            return self._failed(f"upload '{name}'", e)

        logger.info(f"Uploaded document '{name}' ({len(data)} bytes)")
        return created

    async def delete(self, name: str) -> OperationResult[None]:
        """Delete a document. A missing document is a NOT_FOUND failure."""
        try:
            await self._call(f"delete '{name}'", self._backend.delete, name)
        except ServiceError as e:
            return self._failed(f"delete '{name}'", e)

        logger.info(f"Deleted document '{name}'")
        return OperationResult[None].ok()

    async def get_all(self) -> OperationResult[list[DocumentEntity]]:
        """
        List all documents.

        Documents with a persisted order come first, sorted by it; the rest
        follow in backend enumeration order. An empty container yields an
        empty list.
        """
        try:
            blobs = await self._call("list documents", self._backend.list)
        except ServiceError as e:
            return self._failed("list documents", e)

        entities = []
        for blob in blobs:
            created = DocumentEntity.create(
                blob.key, blob.size, self._backend.location(blob.key), parse_order(blob.metadata)
            )
            if not created.successful:
                logger.warning(f"Skipping stored object '{blob.key}': {created.error}")
                continue
            entities.append(created.result)

        return OperationResult[list[DocumentEntity]].ok(sort_by_order(entities))

    async def reorder(
        self, entities: Sequence[DocumentEntity]
    ) -> OperationResult[list[DocumentEntity]]:
        """
        Persist the order of each supplied entity.

        All names are checked up front and nothing is written if any is
        missing. Each write re-checks existence; if one fails part-way, the
        writes already made are restored to their previous values.

        Returns:
            The full listing after the update, as get_all() would.
        """
        batch = list(entities)
        invalid = _check_batch(batch)
        if invalid is not None:
            return self._failed("reorder documents", invalid)

        metadata = await asyncio.gather(
            *(
                self._call(f"read '{entity.name}'", self._backend.get_metadata, entity.name)
                for entity in batch
            ),
            return_exceptions=True,
        )
        for outcome in metadata:
            if isinstance(outcome, ServiceError):
                return self._failed("reorder documents", outcome)
            if isinstance(outcome, BaseException):
                raise outcome
        previous = {entity.name: parse_order(meta) for entity, meta in zip(batch, metadata)}

        applied: list[str] = []
        for entity in batch:
            try:
                await self._call(
                    f"reorder '{entity.name}'",
                    self._backend.set_metadata,
                    entity.name,
                    entity.order,
                )
            except ServiceError as e:
                await self._rollback(applied, previous)
                return self._failed("reorder documents", e)
            applied.append(entity.name)

        logger.info(f"Reordered {len(batch)} document(s)")
        return await self.get_all()

    async def _rollback(self, applied: list[str], previous: dict[str, int | None]) -> None:
        for name in reversed(applied):
            try:
                await self._call(
                    f"restore order of '{name}'", self._backend.set_metadata, name, previous[name]
                )
            except ServiceError as e:
                logger.warning(f"[{e.debug_id}] Could not restore order of '{name}': {e}")

    async def _call(self, action: str, func: Callable[..., Any], *args: Any) -> Any:
        """Run a backend primitive off the event loop under the retry policy."""
        try:
            return await asyncio.to_thread(self._retry.call, func, *args)
        except ServiceError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected backend failure while trying to {action}")
            raise backend_unavailable(action, e) from e

    @staticmethod
    def _failed(action: str, error: ServiceError) -> OperationResult[Any]:
        logger.warning(f"[{error.debug_id}] Failed to {action}: {error}")
        return OperationResult.fail(error)


def sort_by_order(entities: list[DocumentEntity]) -> list[DocumentEntity]:
    """Ordered entities first by order, then unordered ones; stable otherwise."""
    return sorted(entities, key=lambda e: (e.order is None, e.order if e.order is not None else 0))


def _check_batch(batch: list[Any]) -> TerminalError | None:
    if not batch:
        return TerminalError(
            code=ErrorCode.VALIDATION_FAILED,
            message_safe="Reorder requires at least one document",
        )
    if not all(isinstance(entity, DocumentEntity) for entity in batch):
        return TerminalError(
            code=ErrorCode.VALIDATION_FAILED,
            message_safe="Reorder accepts DocumentEntity items only",
        )
    names = [entity.name for entity in batch]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        return TerminalError(
            code=ErrorCode.VALIDATION_FAILED,
            message_safe=f"Reorder batch names a document more than once: {', '.join(duplicates)}",
        )
    return None
