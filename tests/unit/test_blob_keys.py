from unittest.mock import MagicMock

import pytest

from app.storage.factory import BlobStoreFactory
from app.storage.keys import key_extension, thumbnail_key_for
from app.storage.local_disk import LocalDiskBlobStore


class TestThumbnailKey:
    def test_swaps_uploads_for_thumbnails_and_appends_jpg(self) -> None:
        assert thumbnail_key_for("uploads/u1/report.pdf") == "thumbnails/u1/report.pdf.jpg"

    def test_swaps_nested_uploads_segment(self) -> None:
        assert (
            thumbnail_key_for("/tenant/uploads/u1/deck.pptx")
            == "tenant/thumbnails/u1/deck.pptx.jpg"
        )

    def test_prefixes_keys_outside_uploads(self) -> None:
        assert thumbnail_key_for("u1/sheet.xlsx") == "thumbnails/u1/sheet.xlsx.jpg"


class TestKeyExtension:
    def test_lowercases_extension(self) -> None:
        assert key_extension("uploads/u1/REPORT.PDF") == "pdf"

    def test_empty_without_extension(self) -> None:
        assert key_extension("uploads/u1/README") == ""


class TestBlobStoreFactory:
    def test_creates_local_store(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        settings = MagicMock(blob_store_backend="local", blob_store_root=str(tmp_path))
        assert isinstance(BlobStoreFactory.create(settings), LocalDiskBlobStore)

    def test_raises_for_unknown_backend(self) -> None:
        settings = MagicMock(blob_store_backend="s3", blob_store_root="/tmp")
        with pytest.raises(ValueError, match="Unknown blob store backend"):
            BlobStoreFactory.create(settings)
