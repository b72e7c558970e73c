"""File upload schemas."""

from portal.schemas.base import MessageResponse


class UploadResponse(MessageResponse):
    message: str = "File uploaded successfully"
    file_url: str
