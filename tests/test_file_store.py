"""
Tests for the local upload store.
"""
import io
import os

import pytest

from storefront.exceptions import UploadRejected
from storefront.uploads import (
    DOCUMENT_EXTENSIONS,
    MODEL_EXTENSIONS,
    FileStore,
    IncomingFile,
    size_limit_for,
)


@pytest.fixture
def file_store(temp_dir):
    return FileStore(os.path.join(temp_dir, "uploads"))


def incoming(name="part.stl", data=b"solid part\nendsolid part\n", content_type=None):
    return IncomingFile(filename=name, file=io.BytesIO(data), content_type=content_type)


class TestSave:
    """Tests for FileStore.save."""

    def test_save_writes_under_generated_name(self, file_store):
        """Test that the stored name is generated and keeps the extension."""
        # Execute
        descriptor = file_store.save(incoming(), MODEL_EXTENSIONS)

        # Verify
        assert descriptor.original_name == "part.stl"
        assert descriptor.filename != "part.stl"
        assert descriptor.filename.endswith(".stl")
        assert descriptor.path == f"/uploads/{descriptor.filename}"
        assert descriptor.size == len(b"solid part\nendsolid part\n")
        assert file_store.path_of(descriptor).read_bytes() == b"solid part\nendsolid part\n"

    def test_extension_check_is_case_insensitive(self, file_store):
        descriptor = file_store.save(incoming("PART.STL"), MODEL_EXTENSIONS)
        assert descriptor.filename.endswith(".stl")

    def test_mime_type_from_client_or_guess(self, file_store):
        """Test that the client content type wins, else it is guessed from the name."""
        sent = file_store.save(incoming("drawing.pdf", content_type="application/x-custom"), DOCUMENT_EXTENSIONS)
        guessed = file_store.save(incoming("drawing.pdf"), DOCUMENT_EXTENSIONS)

        assert sent.mime_type == "application/x-custom"
        assert guessed.mime_type == "application/pdf"

    def test_disallowed_extension_rejected_with_400(self, file_store):
        """Test that a file outside the allow-list is refused and nothing is written."""
        with pytest.raises(UploadRejected) as exc_info:
            file_store.save(incoming("virus.exe"), MODEL_EXTENSIONS)

        assert exc_info.value.status_code == 400
        assert os.listdir(file_store.uploads_dir) == []

    def test_oversized_file_rejected_with_413_and_removed(self, file_store, monkeypatch):
        """Test that a file over the ceiling is refused and its partial copy deleted."""
        monkeypatch.setattr("storefront.uploads.MAX_MODEL_BYTES", 10)
        monkeypatch.setattr("storefront.uploads.CHUNK_SIZE", 4)

        with pytest.raises(UploadRejected) as exc_info:
            file_store.save(incoming(data=b"x" * 11), MODEL_EXTENSIONS)

        assert exc_info.value.status_code == 413
        assert os.listdir(file_store.uploads_dir) == []

    def test_file_at_exact_limit_accepted(self, file_store, monkeypatch):
        monkeypatch.setattr("storefront.uploads.MAX_MODEL_BYTES", 10)
        descriptor = file_store.save(incoming(data=b"x" * 10), MODEL_EXTENSIONS)
        assert descriptor.size == 10


class TestSaveAll:
    def test_rejected_file_discards_earlier_ones(self, file_store):
        """Test that save_all keeps nothing when any file is refused."""
        uploads = [incoming("a.pdf"), incoming("b.png"), incoming("c.exe")]

        with pytest.raises(UploadRejected):
            file_store.save_all(uploads, DOCUMENT_EXTENSIONS)

        assert os.listdir(file_store.uploads_dir) == []

    def test_saves_every_file(self, file_store):
        saved = file_store.save_all([incoming("a.pdf"), incoming("b.stl")], MODEL_EXTENSIONS | DOCUMENT_EXTENSIONS)
        assert [d.original_name for d in saved] == ["a.pdf", "b.stl"]
        assert len(os.listdir(file_store.uploads_dir)) == 2


class TestMeasureAndRemove:
    def test_measure_keeps_nothing(self, file_store):
        """Test that measuring validates and sizes without writing."""
        assert file_store.measure(incoming(data=b"12345")) == 5
        assert os.listdir(file_store.uploads_dir) == []

    def test_remove_ignores_missing_files(self, file_store):
        descriptor = file_store.save(incoming(), MODEL_EXTENSIONS)

        file_store.remove([descriptor])
        file_store.remove([descriptor])

        assert not file_store.path_of(descriptor).exists()

    def test_size_limits(self):
        assert size_limit_for(".stl") == 50 * 1024 * 1024
        assert size_limit_for(".pdf") == 10 * 1024 * 1024
