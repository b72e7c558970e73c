"""Course API schemas."""

from datetime import datetime

from pydantic import Field

from portal.schemas.base import CamelModel


class CourseCreateRequest(CamelModel):
    name: str = Field(..., max_length=200)
    description: str = Field(default="", max_length=2000)


class CourseUpdateRequest(CamelModel):
    """Name is required; description is kept when omitted."""

    name: str = Field(..., max_length=200)
    description: str | None = Field(default=None, max_length=2000)


class CourseResponse(CamelModel):
    id: str
    name: str
    description: str
    created_at: datetime
    updated_at: datetime
