"""Domain entities (business logic, independent of persistence)."""

from portal.domain.entities.course import Course
from portal.domain.entities.directory import DirectoryRecord
from portal.domain.entities.resources import Material, PreviousYearPaper

__all__ = ["Course", "DirectoryRecord", "Material", "PreviousYearPaper"]
