"""DTOs for course use cases."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CourseCreate:
    name: str
    description: str = ""


@dataclass(frozen=True)
class CourseUpdate:
    """Name is required on update; description is kept when None."""

    name: str
    description: str | None = None
