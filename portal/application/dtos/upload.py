"""DTOs for file upload."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UploadResult:
    file_url: str
    storage_path: str
    checksum: str
    size: int
