"""Material and previous-year paper schemas."""

from datetime import datetime

from pydantic import Field

from portal.application.dtos.resources import ResourceView
from portal.domain.entities.resources import PreviousYearPaper
from portal.schemas.base import CamelModel


class MaterialCreateRequest(CamelModel):
    """The owner is the signed-in faculty member; no facultyId is accepted."""

    course_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=300)
    description: str = Field(..., min_length=1, max_length=5000)
    file_url: str = Field(..., min_length=1, max_length=2048)


class PaperCreateRequest(MaterialCreateRequest):
    year: int | None = Field(default=None, ge=1900, le=2100)


class MaterialUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = Field(default=None, max_length=5000)
    course_id: str | None = None
    file_url: str | None = Field(default=None, min_length=1, max_length=2048)


class PaperUpdateRequest(MaterialUpdateRequest):
    year: int | None = Field(default=None, ge=1900, le=2100)


class MaterialResponse(CamelModel):
    id: str
    faculty_id: str
    course_id: str
    name: str
    description: str
    file_url: str
    upload_date: datetime
    created_at: datetime
    updated_at: datetime
    faculty_name: str
    course_name: str

    @classmethod
    def from_view(cls, view: ResourceView) -> "MaterialResponse":
        item = view.item
        return cls(
            id=item.id,
            faculty_id=item.faculty_id,
            course_id=item.course_id,
            name=item.name,
            description=item.description,
            file_url=item.file_url,
            upload_date=item.upload_date,
            created_at=item.created_at,
            updated_at=item.updated_at,
            faculty_name=view.faculty_name,
            course_name=view.course_name,
        )


class PaperResponse(MaterialResponse):
    year: int

    @classmethod
    def from_view(cls, view: ResourceView) -> "PaperResponse":
        base = MaterialResponse.from_view(view).model_dump()
        year = view.item.year if isinstance(view.item, PreviousYearPaper) else 0
        return cls(**base, year=year)
