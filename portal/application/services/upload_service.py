"""File upload: validate the file type and size, store it, return its URL."""

from __future__ import annotations

import hashlib
import io
import logging
import posixpath

from portal.application.dtos.upload import UploadResult
from portal.domain.exceptions import ValidationException
from portal.infrastructure.exceptions import FileTooLargeError, UnsupportedFileTypeError
from portal.infrastructure.external.storage.protocol import StorageProtocol
from portal.shared.utils import generate_cuid

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (
    "jpg", "jpeg", "png", "pdf", "doc", "docx", "ppt", "pptx", "xls", "xlsx", "txt",
)


def file_extension(filename: str) -> str:
    """Lower-cased extension without the dot ('' when there is none)."""
    _, ext = posixpath.splitext((filename or "").replace("\\", "/"))
    return ext.lstrip(".").lower()


class UploadService:
    """Stores uploads as <folder>/<cuid>.<ext> in the configured backend."""

    def __init__(
        self,
        storage: StorageProtocol,
        folder: str,
        max_size: int,
        allowed_extensions: tuple[str, ...] = ALLOWED_EXTENSIONS,
    ) -> None:
        self._storage = storage
        self._folder = folder.strip("/")
        self._max_size = max_size
        self._allowed = allowed_extensions

    @property
    def max_size(self) -> int:
        """Largest accepted upload in bytes."""
        return self._max_size

    async def upload(
        self,
        filename: str | None,
        content: bytes,
        content_type: str | None = None,
        uploaded_by: str | None = None,
    ) -> UploadResult:
        """Store content and return its public URL.

        Raises:
            ValidationException: no file was sent.
            UnsupportedFileTypeError: extension not allowed.
            FileTooLargeError: content exceeds the size limit.
        """
        if not filename:
            raise ValidationException("No file uploaded", field="file")
        ext = file_extension(filename)
        if ext not in self._allowed:
            raise UnsupportedFileTypeError(filename, list(self._allowed))
        if len(content) > self._max_size:
            raise FileTooLargeError(len(content), self._max_size)

        storage_path = f"{self._folder}/{generate_cuid()}.{ext}" if self._folder else f"{generate_cuid()}.{ext}"
        checksum = hashlib.sha256(content).hexdigest()
        metadata = {"original_filename": filename}
        if uploaded_by:
            metadata["uploaded_by"] = uploaded_by
        stored = await self._storage.upload(
            io.BytesIO(content),
            storage_path,
            checksum,
            content_type or "application/octet-stream",
            metadata,
        )
        logger.info("File uploaded: path=%s size=%d", storage_path, stored["size"])
        return UploadResult(
            file_url=self._storage.public_url(storage_path),
            storage_path=storage_path,
            checksum=stored["checksum"],
            size=stored["size"],
        )
