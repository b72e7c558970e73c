"""Sign-in and current-user API schemas."""

from portal.domain.enums import Role
from portal.schemas.base import CamelModel, MessageResponse
from portal.schemas.course import CourseResponse


class SignInRequest(CamelModel):
    """Body for POST /auth/google-signin when the token is sent in the body."""

    token: str | None = None


class ProfileResponse(CamelModel):
    """Public projection of the signed-in user's directory record."""

    id: str
    email: str
    role: Role
    display_name: str | None = None
    avatar_url: str | None = None
    course_ids: list[str] = []


class SignInResponse(MessageResponse):
    user: ProfileResponse


class GetUserResponse(CamelModel):
    """Signed-in user with resolved courses; experience is set for faculty only."""

    user: ProfileResponse
    experience: int | None = None
    courses: list[CourseResponse] = []
