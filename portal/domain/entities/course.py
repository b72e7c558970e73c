"""Course domain entity."""

from dataclasses import dataclass
from datetime import datetime

from portal.domain.exceptions import ValidationException


def normalize_course_name(name: str) -> str:
    """Key used for course-name uniqueness (case-insensitive, trimmed)."""
    return " ".join((name or "").split()).lower()


@dataclass
class Course:
    """A course that faculty teach and materials and papers belong to."""

    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    description: str = ""

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip()
        self.description = self.description or ""
        self.validate()

    def validate(self) -> None:
        if not self.id:
            raise ValidationException("Course ID is required", field="id")
        if not self.name:
            raise ValidationException("Course name is required", field="name")

    @property
    def name_key(self) -> str:
        return normalize_course_name(self.name)
