"""Faculty profile/dashboard and admin dashboard aggregation."""

from __future__ import annotations

from portal.application.dtos.dashboard import (
    AdminDashboard,
    CourseDistributionItem,
    FacultyDashboard,
)
from portal.application.dtos.directory import FacultyProfile
from portal.application.interfaces.repositories import (
    ICourseRepository,
    IDirectoryRepository,
    IResourceRepository,
)
from portal.application.services.authorization_service import AuthorizationService
from portal.application.services.directory_service import DirectoryService
from portal.application.services.resource_service import ResourceService
from portal.domain.entities.directory import DirectoryRecord
from portal.domain.enums import Action, Role
from portal.domain.exceptions import ResourceNotFoundException

RECENT_LIMIT = 5


class DashboardService:
    """Read-only aggregates over the directory, courses, materials and papers."""

    def __init__(
        self,
        directory_repo: IDirectoryRepository,
        course_repo: ICourseRepository,
        material_repo: IResourceRepository,
        paper_repo: IResourceRepository,
        directory_service: DirectoryService,
        material_service: ResourceService,
        paper_service: ResourceService,
        authorization: AuthorizationService,
    ) -> None:
        self._directory_repo = directory_repo
        self._course_repo = course_repo
        self._material_repo = material_repo
        self._paper_repo = paper_repo
        self._directory_service = directory_service
        self._material_service = material_service
        self._paper_service = paper_service
        self._authorization = authorization

    async def _faculty_by_subject(self, subject_id: str) -> DirectoryRecord:
        record = await self._directory_repo.find_by_subject_id(subject_id)
        if record is None or record.role != Role.FACULTY:
            raise ResourceNotFoundException("faculty", subject_id)
        return record

    async def _profile(self, record: DirectoryRecord) -> FacultyProfile:
        return FacultyProfile(
            summary=await self._directory_service.summarize_faculty(record),
            materials_count=await self._material_repo.count(record.id),
            papers_count=await self._paper_repo.count(record.id),
        )

    async def faculty_profile(self, actor: DirectoryRecord, subject_id: str) -> FacultyProfile:
        """Profile of the faculty member linked to subject_id (own profile, or admin)."""
        record = await self._faculty_by_subject(subject_id)
        self._authorization.require(actor, Action.FACULTY_VIEW_PROFILE, owner_id=record.id)
        return await self._profile(record)

    async def faculty_dashboard(self, actor: DirectoryRecord, subject_id: str) -> FacultyDashboard:
        record = await self._faculty_by_subject(subject_id)
        self._authorization.require(actor, Action.FACULTY_VIEW_DASHBOARD, owner_id=record.id)
        profile = await self._profile(record)
        materials = await self._material_repo.list_recent(RECENT_LIMIT, faculty_id=record.id)
        papers = await self._paper_repo.list_recent(RECENT_LIMIT, faculty_id=record.id)
        return FacultyDashboard(
            profile=profile,
            total_courses=len(profile.summary.courses),
            recent_materials=await self._material_service.to_views(materials),
            recent_papers=await self._paper_service.to_views(papers),
        )

    async def admin_dashboard(self) -> AdminDashboard:
        faculty = await self._directory_repo.list_by_role(Role.FACULTY)
        courses = await self._course_repo.list_all()
        courses_by_id = {c.id: c for c in courses}

        recent_faculty = sorted(faculty, key=lambda r: r.created_at, reverse=True)[:RECENT_LIMIT]
        faculty_counts = {c.id: 0 for c in courses}
        for record in faculty:
            for course_id in record.course_ids:
                if course_id in faculty_counts:
                    faculty_counts[course_id] += 1

        materials = await self._material_repo.list_recent(RECENT_LIMIT)
        papers = await self._paper_repo.list_recent(RECENT_LIMIT)
        return AdminDashboard(
            total_students=await self._directory_repo.count_by_role(Role.STUDENT),
            total_faculty=len(faculty),
            total_courses=len(courses),
            total_materials=await self._material_repo.count(),
            total_papers=await self._paper_repo.count(),
            recent_faculty=[
                await self._directory_service.summarize_faculty(r, courses_by_id)
                for r in recent_faculty
            ],
            recent_materials=await self._material_service.to_views(materials),
            recent_papers=await self._paper_service.to_views(papers),
            course_distribution=[
                CourseDistributionItem(course_id=c.id, name=c.name, faculty_count=faculty_counts[c.id])
                for c in courses
            ],
        )
