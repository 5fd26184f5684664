"""
Local file store for uploaded model files and project documents.

Files are checked against an extension allow-list and a size ceiling while
they are copied, written under a generated name, and served by the app at
``/uploads/<name>``.
"""
import logging
import mimetypes
import uuid
from pathlib import Path
from typing import BinaryIO, Iterable, List, NamedTuple, Optional

from storefront.exceptions import UploadRejected
from storefront.models.common import FileDescriptor

logger = logging.getLogger(__name__)

MODEL_EXTENSIONS = frozenset({".stl", ".obj", ".3mf", ".ply"})
DOCUMENT_EXTENSIONS = frozenset({".pdf", ".doc", ".docx", ".xls", ".xlsx", ".jpg", ".jpeg", ".png"})

MAX_MODEL_BYTES = 50 * 1024 * 1024
MAX_DOCUMENT_BYTES = 10 * 1024 * 1024
MAX_PROJECT_FILES = 10

PUBLIC_PREFIX = "/uploads"
CHUNK_SIZE = 1024 * 1024


class IncomingFile(NamedTuple):
    """An uploaded file as handed over by the HTTP layer."""
    filename: str
    file: BinaryIO
    content_type: Optional[str] = None

    @classmethod
    def from_upload(cls, upload) -> "IncomingFile":
        """Wrap a framework upload object (filename, file, content_type)."""
        return cls(filename=upload.filename or "", file=upload.file, content_type=upload.content_type)


def extension_of(filename: str) -> str:
    return Path(filename or "").suffix.lower()


def size_limit_for(extension: str) -> int:
    """Size ceiling in bytes for a file with ``extension``."""
    return MAX_MODEL_BYTES if extension in MODEL_EXTENSIONS else MAX_DOCUMENT_BYTES


class FileStore:
    """Manages uploaded files on local disk."""

    def __init__(self, uploads_dir: str):
        """Initialize file store.

        Args:
            uploads_dir: Directory to write uploads to (created if missing)
        """
        self.uploads_dir = Path(uploads_dir)
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    def _check_extension(self, upload: IncomingFile, allowed: Iterable[str]) -> str:
        extension = extension_of(upload.filename)
        allowed = frozenset(allowed)
        if extension not in allowed:
            raise UploadRejected(
                f"File type '{extension or upload.filename}' is not allowed. "
                f"Allowed types: {', '.join(sorted(allowed))}"
            )
        return extension

    def _mime_type(self, upload: IncomingFile) -> str:
        if upload.content_type:
            return upload.content_type
        guessed, _ = mimetypes.guess_type(upload.filename)
        return guessed or "application/octet-stream"

    def _copy(self, upload: IncomingFile, out: Optional[BinaryIO], limit: int) -> int:
        """Copy ``upload`` into ``out`` (or just count bytes). Raises 413 past ``limit``."""
        size = 0
        while True:
            chunk = upload.file.read(CHUNK_SIZE)
            if not chunk:
                return size
            size += len(chunk)
            if size > limit:
                raise UploadRejected(
                    f"File '{upload.filename}' exceeds the {limit // (1024 * 1024)} MB limit",
                    status_code=413,
                )
            if out is not None:
                out.write(chunk)

    def measure(self, upload: IncomingFile, allowed: Iterable[str] = MODEL_EXTENSIONS) -> int:
        """Validate an upload without keeping it; returns its size in bytes."""
        extension = self._check_extension(upload, allowed)
        return self._copy(upload, None, size_limit_for(extension))

    def save(self, upload: IncomingFile, allowed: Iterable[str]) -> FileDescriptor:
        """
        Validate and write one upload.

        Args:
            upload: The incoming file
            allowed: Allowed lower-case extensions, with the dot

        Returns:
            Descriptor of the stored file

        Raises:
            UploadRejected: Extension not allowed (400) or file too large (413)
        """
        extension = self._check_extension(upload, allowed)
        filename = f"{uuid.uuid4().hex}{extension}"
        target = self.uploads_dir / filename

        try:
            with open(target, "wb") as out:
                size = self._copy(upload, out, size_limit_for(extension))
        except BaseException:
            # Never leave a partial file behind
            if target.exists():
                target.unlink()
            raise

        logger.info(f"Stored upload {upload.filename} as {filename} ({size} bytes)")
        return FileDescriptor(
            original_name=upload.filename,
            filename=filename,
            path=f"{PUBLIC_PREFIX}/{filename}",
            size=size,
            mime_type=self._mime_type(upload),
        )

    def save_all(self, uploads: List[IncomingFile], allowed: Iterable[str]) -> List[FileDescriptor]:
        """Save several uploads; if any is rejected, none are kept."""
        saved: List[FileDescriptor] = []
        try:
            for upload in uploads:
                saved.append(self.save(upload, allowed))
        except BaseException:
            self.remove(saved)
            raise
        return saved

    def remove(self, descriptors: Iterable[FileDescriptor]) -> None:
        """Delete stored files; missing files are ignored."""
        for descriptor in descriptors:
            path = self.uploads_dir / descriptor.filename
            if path.exists():
                path.unlink()
                logger.info(f"Removed upload {descriptor.filename}")

    def path_of(self, descriptor: FileDescriptor) -> Path:
        return self.uploads_dir / descriptor.filename
