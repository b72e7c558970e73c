"""Student and faculty administration schemas."""

from datetime import datetime

from pydantic import Field

from portal.application.dtos.directory import FacultyProfile, FacultySummary
from portal.schemas.auth import ProfileResponse
from portal.schemas.base import CamelModel
from portal.schemas.course import CourseResponse


class StudentCreateRequest(CamelModel):
    email: str = Field(..., max_length=320)
    name: str | None = Field(default=None, max_length=200)
    course_ids: list[str] = []


class StudentUpdateRequest(CamelModel):
    """Omitted fields are left unchanged."""

    name: str | None = Field(default=None, max_length=200)
    email: str | None = Field(default=None, max_length=320)
    join_date: datetime | None = None
    course_ids: list[str] | None = None


class RecordResponse(ProfileResponse):
    """Directory record as shown to admins, with join and audit dates."""

    join_date: datetime
    created_at: datetime
    updated_at: datetime


class StudentResponse(RecordResponse):
    pass


class FacultyCreateRequest(CamelModel):
    email: str = Field(..., max_length=320)
    course_ids: list[str]
    join_date: datetime | None = None
    name: str | None = Field(default=None, max_length=200)


class FacultyUpdateRequest(CamelModel):
    """At least one of courseIds or joinDate is required."""

    course_ids: list[str] | None = None
    join_date: datetime | None = None


class FacultyResponse(RecordResponse):
    """Faculty record with derived experience and course display names."""

    experience: int
    course_names: str
    courses: list[CourseResponse] = []

    @classmethod
    def from_summary(cls, summary: FacultySummary) -> "FacultyResponse":
        record = summary.record
        return cls(
            id=record.id,
            email=record.email,
            role=record.role,
            display_name=record.display_name,
            avatar_url=record.avatar_url,
            course_ids=record.course_ids,
            join_date=record.join_date,
            created_at=record.created_at,
            updated_at=record.updated_at,
            experience=summary.experience,
            course_names=summary.course_names,
            courses=[CourseResponse.model_validate(c) for c in summary.courses],
        )


class FacultyProfileResponse(FacultyResponse):
    materials_count: int
    papers_count: int

    @classmethod
    def from_profile(cls, profile: FacultyProfile) -> "FacultyProfileResponse":
        base = FacultyResponse.from_summary(profile.summary)
        return cls(
            **base.model_dump(),
            materials_count=profile.materials_count,
            papers_count=profile.papers_count,
        )
