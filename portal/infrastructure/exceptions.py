"""Infrastructure exceptions for storage operations.

Storage errors extend PortalException so presentation can map them
to HTTP responses consistently.
"""

from portal.domain.exceptions import PortalException


class StorageException(PortalException):
    """Base exception for storage operations."""


class StorageUploadError(StorageException):
    """File upload failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to upload file: {file_path}",
            "STORAGE_UPLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageChecksumMismatchError(StorageException):
    """Checksum validation failed (corrupted in transit)."""

    def __init__(self, file_path: str, expected: str, actual: str) -> None:
        super().__init__(
            f"Checksum mismatch for file: {file_path}",
            "STORAGE_CHECKSUM_ERROR",
            {"file_path": file_path, "expected": expected, "actual": actual},
        )


class StorageAlreadyExistsError(StorageException):
    """File already exists with different content."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"File already exists: {file_path}",
            "STORAGE_EXISTS_ERROR",
            {"file_path": file_path},
        )


class StoragePermissionError(StorageException):
    """Storage path escapes the storage root."""

    def __init__(self, file_path: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation} on {file_path}",
            "STORAGE_PERMISSION_ERROR",
            {"file_path": file_path, "operation": operation},
        )


class UnsupportedFileTypeError(StorageException):
    """Uploaded file's extension is not on the allow-list."""

    def __init__(self, filename: str, allowed: list[str]) -> None:
        super().__init__(
            "Unsupported file type",
            "STORAGE_UNSUPPORTED_TYPE",
            {"filename": filename, "allowed": allowed},
        )


class FileTooLargeError(StorageException):
    """Uploaded file exceeds MAX_UPLOAD_SIZE."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            f"File exceeds maximum upload size of {limit} bytes",
            "STORAGE_FILE_TOO_LARGE",
            {"size": size, "limit": limit},
        )
