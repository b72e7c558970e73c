"""UploadService with the local storage backend."""

import hashlib
from pathlib import Path

import pytest

from portal.application.services.upload_service import UploadService, file_extension
from portal.domain.exceptions import ValidationException
from portal.infrastructure.exceptions import FileTooLargeError, UnsupportedFileTypeError
from portal.infrastructure.external.storage.local_storage import LocalStorageService


@pytest.fixture
def service(tmp_path: Path) -> UploadService:
    storage = LocalStorageService(storage_root=str(tmp_path), base_url="http://files.test")
    return UploadService(storage, "it_hub_files", max_size=1024)


def test_file_extension() -> None:
    assert file_extension("Notes.PDF") == "pdf"
    assert file_extension("archive.tar.gz") == "gz"
    assert file_extension("README") == ""


async def test_upload_stores_under_folder(service: UploadService, tmp_path: Path) -> None:
    content = b"%PDF-1.4 test"
    result = await service.upload("notes.pdf", content, "application/pdf", uploaded_by="fac1")
    assert result.storage_path.startswith("it_hub_files/")
    assert result.storage_path.endswith(".pdf")
    assert result.file_url == f"http://files.test/files/{result.storage_path}"
    assert result.checksum == hashlib.sha256(content).hexdigest()
    assert result.size == len(content)
    assert (tmp_path / result.storage_path).read_bytes() == content


async def test_missing_file_rejected(service: UploadService) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await service.upload(None, b"")
    assert exc_info.value.message == "No file uploaded"


async def test_disallowed_extension_rejected(service: UploadService) -> None:
    with pytest.raises(UnsupportedFileTypeError):
        await service.upload("script.exe", b"MZ")


async def test_oversized_file_rejected(service: UploadService) -> None:
    with pytest.raises(FileTooLargeError):
        await service.upload("big.txt", b"x" * 2048)
