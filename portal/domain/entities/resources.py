"""Course materials and previous-year papers.

Both are files a faculty member publishes against a course. Ownership is
the faculty record id taken from the verified identity at creation.
"""

from dataclasses import dataclass
from datetime import datetime

from portal.domain.exceptions import ValidationException

MIN_PAPER_YEAR = 1900
MAX_PAPER_YEAR = 2100


@dataclass
class Material:
    """Domain entity for a course material."""

    id: str
    faculty_id: str
    course_id: str
    name: str
    description: str
    file_url: str
    upload_date: datetime
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip()
        self.description = (self.description or "").strip()
        self.validate()

    def validate(self) -> None:
        """Validate required fields. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("ID is required", field="id")
        if not self.faculty_id:
            raise ValidationException("Owning faculty is required", field="faculty_id")
        if not self.course_id:
            raise ValidationException("Course is required", field="course_id")
        if not self.name:
            raise ValidationException("Name is required", field="name")
        if not self.description:
            raise ValidationException("Description is required", field="description")
        if not self.file_url:
            raise ValidationException("File URL is required", field="file_url")

    def is_owned_by(self, record_id: str) -> bool:
        return self.faculty_id == record_id


@dataclass
class PreviousYearPaper(Material):
    """A past examination paper; a material with an exam year."""

    year: int = 0

    def validate(self) -> None:
        super().validate()
        if not MIN_PAPER_YEAR <= self.year <= MAX_PAPER_YEAR:
            raise ValidationException(
                f"Year must be between {MIN_PAPER_YEAR} and {MAX_PAPER_YEAR}",
                field="year",
            )
