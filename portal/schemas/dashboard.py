"""Faculty and admin dashboard schemas."""

from portal.application.dtos.dashboard import AdminDashboard, FacultyDashboard
from portal.schemas.base import CamelModel
from portal.schemas.directory import FacultyProfileResponse, FacultyResponse
from portal.schemas.resources import MaterialResponse, PaperResponse


class FacultyStats(CamelModel):
    total_materials: int
    total_papers: int
    total_courses: int


class FacultyDashboardResponse(CamelModel):
    profile: FacultyProfileResponse
    stats: FacultyStats
    recent_materials: list[MaterialResponse]
    recent_papers: list[PaperResponse]

    @classmethod
    def from_dashboard(cls, dashboard: FacultyDashboard) -> "FacultyDashboardResponse":
        return cls(
            profile=FacultyProfileResponse.from_profile(dashboard.profile),
            stats=FacultyStats(
                total_materials=dashboard.profile.materials_count,
                total_papers=dashboard.profile.papers_count,
                total_courses=dashboard.total_courses,
            ),
            recent_materials=[MaterialResponse.from_view(v) for v in dashboard.recent_materials],
            recent_papers=[PaperResponse.from_view(v) for v in dashboard.recent_papers],
        )


class AdminStats(CamelModel):
    total_students: int
    total_faculty: int
    total_courses: int
    total_materials: int
    total_papers: int


class CourseDistributionResponse(CamelModel):
    course_id: str
    name: str
    faculty_count: int


class AdminDashboardResponse(CamelModel):
    stats: AdminStats
    recent_faculty: list[FacultyResponse]
    recent_materials: list[MaterialResponse]
    recent_papers: list[PaperResponse]
    course_distribution: list[CourseDistributionResponse]

    @classmethod
    def from_dashboard(cls, dashboard: AdminDashboard) -> "AdminDashboardResponse":
        return cls(
            stats=AdminStats(
                total_students=dashboard.total_students,
                total_faculty=dashboard.total_faculty,
                total_courses=dashboard.total_courses,
                total_materials=dashboard.total_materials,
                total_papers=dashboard.total_papers,
            ),
            recent_faculty=[FacultyResponse.from_summary(s) for s in dashboard.recent_faculty],
            recent_materials=[MaterialResponse.from_view(v) for v in dashboard.recent_materials],
            recent_papers=[PaperResponse.from_view(v) for v in dashboard.recent_papers],
            course_distribution=[
                CourseDistributionResponse.model_validate(item)
                for item in dashboard.course_distribution
            ],
        )
