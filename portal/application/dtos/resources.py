"""DTOs for material and previous-year paper use cases."""

from dataclasses import dataclass

from portal.domain.entities.resources import Material

UNKNOWN_FACULTY = "Unknown"


@dataclass(frozen=True)
class ResourceCreate:
    """Owner is never part of the payload; it comes from the verified identity."""

    course_id: str
    name: str
    description: str
    file_url: str
    year: int | None = None


@dataclass(frozen=True)
class ResourceUpdate:
    """Fields left as None are not changed."""

    name: str | None = None
    description: str | None = None
    course_id: str | None = None
    file_url: str | None = None
    year: int | None = None


@dataclass(frozen=True)
class ResourceView:
    """A material or paper with the display names of its owner and course."""

    item: Material
    faculty_name: str
    course_name: str
