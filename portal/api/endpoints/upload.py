"""File upload endpoint (faculty and admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Request, UploadFile

from portal.api.dependencies import get_upload_service, require_action
from portal.application.services import UploadService
from portal.core.limiter import limit_upload
from portal.domain.entities.directory import DirectoryRecord
from portal.domain.enums import Action
from portal.schemas.upload import UploadResponse

router = APIRouter()


@router.post("", response_model=UploadResponse)
@limit_upload
async def upload_file(
    request: Request,
    actor: Annotated[DirectoryRecord, Depends(require_action(Action.FILE_UPLOAD))],
    svc: Annotated[UploadService, Depends(get_upload_service)],
    file: UploadFile | None = File(None),
) -> UploadResponse:
    """Store a multipart `file` and return its public URL."""
    if file is None:
        result = await svc.upload(None, b"")
    else:
        # Read at most one byte past the limit.
        content = await file.read(svc.max_size + 1)
        result = await svc.upload(
            file.filename, content, file.content_type, uploaded_by=actor.id
        )
    return UploadResponse(file_url=result.file_url)
