"""Sign-in and current-user endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from portal.api.dependencies import (
    get_directory_service,
    get_sign_in_service,
    get_sign_in_subject_id,
    get_subject_id,
)
from portal.application.services import DirectoryService, SignInService
from portal.core.limiter import limit_auth
from portal.schemas.auth import GetUserResponse, ProfileResponse, SignInResponse
from portal.schemas.course import CourseResponse

router = APIRouter()


@router.post("/google-signin", response_model=SignInResponse)
@limit_auth
async def google_sign_in(
    request: Request,
    subject_id: Annotated[str, Depends(get_sign_in_subject_id)],
    sign_in: Annotated[SignInService, Depends(get_sign_in_service)],
) -> SignInResponse:
    """Link the verified identity to its directory record and return it."""
    result = await sign_in.sign_in(subject_id)
    return SignInResponse(
        message="User authenticated",
        user=ProfileResponse.model_validate(result.record),
    )


@router.get("/get-user", response_model=GetUserResponse)
async def get_user(
    subject_id: Annotated[str, Depends(get_subject_id)],
    directory: Annotated[DirectoryService, Depends(get_directory_service)],
) -> GetUserResponse:
    """Signed-in user's record, courses, and experience (faculty only)."""
    overview = await directory.get_user_overview(subject_id)
    return GetUserResponse(
        user=ProfileResponse.model_validate(overview.record),
        experience=overview.experience,
        courses=[CourseResponse.model_validate(c) for c in overview.courses],
    )
