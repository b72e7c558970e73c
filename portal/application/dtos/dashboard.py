"""DTOs for the faculty and admin dashboards."""

from dataclasses import dataclass

from portal.application.dtos.directory import FacultyProfile, FacultySummary
from portal.application.dtos.resources import ResourceView


@dataclass(frozen=True)
class FacultyDashboard:
    profile: FacultyProfile
    total_courses: int
    recent_materials: list[ResourceView]
    recent_papers: list[ResourceView]


@dataclass(frozen=True)
class CourseDistributionItem:
    course_id: str
    name: str
    faculty_count: int


@dataclass(frozen=True)
class AdminDashboard:
    total_students: int
    total_faculty: int
    total_courses: int
    total_materials: int
    total_papers: int
    recent_faculty: list[FacultySummary]
    recent_materials: list[ResourceView]
    recent_papers: list[ResourceView]
    course_distribution: list[CourseDistributionItem]
