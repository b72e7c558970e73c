"""Storage service protocol (DIP). Implementations: LocalStorageService, S3StorageService."""

from typing import Any, BinaryIO, Protocol


class StorageProtocol(Protocol):
    """Protocol for the blob store holding uploaded files (local, S3-compatible)."""

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Upload file with checksum verification. Idempotent if same checksum."""
        ...

    def public_url(self, storage_ref: str) -> str:
        """Return the URL clients fetch the file from."""
        ...
