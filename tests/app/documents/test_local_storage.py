"""
Unit tests for the local filesystem blob backend.

The local backend should:
1. Store content under <root>/<container>/content
2. Keep order metadata in side files that vanish with the document
3. Raise NOT_FOUND for missing documents
"""

import io

import pytest

from app.documents.services.document_store import BlobDocumentStore
from app.documents.services.local_storage import LocalBlobBackend
from app.documents.services.storage_protocol import BlobBackend, BlobInfo
from docstore_core.config import DocumentStoreConfig
from docstore_core.domain import DocumentEntity
from docstore_core.runtime.errors import ErrorCode, TerminalError


class TestLocalPut:
    """Tests for writing content."""

    def test_put_writes_file(self, local_backend):
        """put() should write the bytes under the content directory."""
        local_backend.put("doc.pdf", b"hello")

        assert (local_backend.content_dir / "doc.pdf").read_bytes() == b"hello"

    def test_put_overwrites_and_clears_order(self, local_backend):
        """A second put should replace content and drop metadata."""
        local_backend.put("doc.pdf", b"one")
        local_backend.set_metadata("doc.pdf", 4)

        local_backend.put("doc.pdf", b"two!")

        assert (local_backend.content_dir / "doc.pdf").read_bytes() == b"two!"
        assert local_backend.get_metadata("doc.pdf") == {}

    def test_put_leaves_no_temp_files(self, local_backend):
        """Temp files should be renamed away after a successful write."""
        local_backend.put("doc.pdf", b"data")

        assert list(local_backend.tmp_dir.iterdir()) == []

    @pytest.mark.parametrize("key", ["../escape.pdf", "nested/doc.pdf", ".."])
    def test_path_like_keys_are_rejected(self, local_backend, key):
        """Keys must not leave the content directory."""
        with pytest.raises(TerminalError) as exc_info:
            local_backend.put(key, b"x")

        assert exc_info.value.code == ErrorCode.VALIDATION_FAILED


class TestLocalListAndMetadata:
    """Tests for listing and metadata."""

    def test_list_empty(self, local_backend):
        assert local_backend.list() == []

    def test_list_reports_size_and_metadata(self, local_backend):
        """list() should return every document sorted by name."""
        local_backend.put("b.pdf", b"xx")
        local_backend.put("a.pdf", b"xyz")
        local_backend.set_metadata("b.pdf", 1)

        assert local_backend.list() == [
            BlobInfo(key="a.pdf", size=3, metadata={}),
            BlobInfo(key="b.pdf", size=2, metadata={"order": "1"}),
        ]

    def test_set_metadata_none_clears_order(self, local_backend):
        local_backend.put("a.pdf", b"x")
        local_backend.set_metadata("a.pdf", 2)

        local_backend.set_metadata("a.pdf", None)

        assert local_backend.get_metadata("a.pdf") == {}

    def test_non_object_metadata_is_ignored(self, local_backend):
        """A side file holding a JSON list should read as no metadata."""
        local_backend.put("a.pdf", b"x")
        (local_backend.metadata_dir / "a.pdf.json").write_text("[1, 2]")

        assert local_backend.get_metadata("a.pdf") == {}
        assert local_backend.list()[0].metadata == {}

    def test_set_metadata_missing_raises_not_found(self, local_backend):
        """Metadata writes on missing documents should fail, leaving no file."""
        with pytest.raises(TerminalError) as exc_info:
            local_backend.set_metadata("ghost.pdf", 1)

        assert exc_info.value.code == ErrorCode.NOT_FOUND
        assert list(local_backend.metadata_dir.iterdir()) == []

    def test_get_metadata_missing_raises_not_found(self, local_backend):
        with pytest.raises(TerminalError) as exc_info:
            local_backend.get_metadata("ghost.pdf")

        assert exc_info.value.code == ErrorCode.NOT_FOUND

    def test_unreadable_metadata_is_ignored(self, local_backend):
        """A corrupt side file should read as no metadata."""
        local_backend.put("a.pdf", b"x")
        (local_backend.metadata_dir / "a.pdf.json").write_text("{not json")

        assert local_backend.get_metadata("a.pdf") == {}


class TestLocalDelete:
    """Tests for deletion."""

    def test_delete_removes_content_and_metadata(self, local_backend):
        local_backend.put("a.pdf", b"x")
        local_backend.set_metadata("a.pdf", 1)

        local_backend.delete("a.pdf")

        assert local_backend.list() == []
        assert list(local_backend.metadata_dir.iterdir()) == []

    def test_delete_missing_raises_not_found(self, local_backend):
        with pytest.raises(TerminalError) as exc_info:
            local_backend.delete("ghost.pdf")

        assert exc_info.value.code == ErrorCode.NOT_FOUND


class TestLocalLocation:
    """Tests for location URIs."""

    def test_location_is_file_uri(self, local_backend):
        location = local_backend.location("a.pdf")

        assert location.startswith("file://")
        assert location.endswith("/docs/content/a.pdf")

    def test_satisfies_protocol(self, local_backend):
        assert isinstance(local_backend, BlobBackend)


class TestLocalBackedStore:
    """The document store running on the filesystem backend."""

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, local_backend):
        """Upload, reorder, list and delete should work end to end."""
        store = BlobDocumentStore(local_backend)

        await store.upload("a.pdf", io.BytesIO(b"aaa"))
        await store.upload("b.pdf", io.BytesIO(b"bb"))
        reordered = await store.reorder(
            [
                DocumentEntity.create("b.pdf", 2, local_backend.location("b.pdf"), 1).result,
                DocumentEntity.create("a.pdf", 3, local_backend.location("a.pdf"), 2).result,
            ]
        )
        deleted = await store.delete("b.pdf")
        listing = await store.get_all()

        assert [(e.name, e.order) for e in reordered.result] == [("b.pdf", 1), ("a.pdf", 2)]
        assert deleted.successful is True
        assert listing.result == [
            DocumentEntity.create("a.pdf", 3, local_backend.location("a.pdf"), 2).result
        ]


# --- Fixtures ---


@pytest.fixture
def local_backend(tmp_path):
    return LocalBlobBackend(DocumentStoreConfig(backend="local", container="docs", local_path=str(tmp_path)))
