"""Directory administration: students, faculty, and the signed-in user's view."""

from __future__ import annotations

import logging

from portal.application.dtos.directory import (
    FacultyCreate,
    FacultySummary,
    FacultyUpdate,
    StudentCreate,
    StudentUpdate,
    UserOverview,
)
from portal.application.interfaces.repositories import (
    ICourseRepository,
    IDirectoryRepository,
)
from portal.application.services.course_service import resolve_course_ids
from portal.domain.entities.course import Course
from portal.domain.entities.directory import DirectoryRecord, normalize_course_ids
from portal.domain.enums import Role
from portal.domain.exceptions import (
    AlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from portal.domain.role_resolver import RoleResolver, normalize_email
from portal.shared.utils import ensure_utc, generate_cuid, utc_now, whole_years_since

logger = logging.getLogger(__name__)


class DirectoryService:
    """Admin CRUD over directory records plus the get-user view."""

    def __init__(
        self,
        directory_repo: IDirectoryRepository,
        course_repo: ICourseRepository,
        role_resolver: RoleResolver,
    ) -> None:
        self._directory_repo = directory_repo
        self._course_repo = course_repo
        self._role_resolver = role_resolver

    # ---- shared helpers ----

    def _institutional_email(self, email: str) -> str:
        normalized = normalize_email(email or "")
        if not normalized:
            raise ValidationException("Email is required", field="email")
        if self._role_resolver.resolve(normalized) is None:
            raise ValidationException(
                "Email must be an institutional address", field="email"
            )
        return normalized

    async def _ensure_email_free(self, email: str, record_id: str | None = None) -> None:
        existing = await self._directory_repo.find_by_email(email)
        if existing is not None and existing.id != record_id:
            raise AlreadyExistsException("User", "email", email)

    async def _get_with_role(self, record_id: str, role: Role) -> DirectoryRecord:
        record = await self._directory_repo.get_by_id(record_id)
        if record is None:
            raise ResourceNotFoundException(role.value, record_id)
        if record.role != role:
            raise ValidationException(f"User is not a {role.value}", field="role")
        return record

    async def summarize_faculty(
        self,
        record: DirectoryRecord,
        courses_by_id: dict[str, Course] | None = None,
    ) -> FacultySummary:
        """Faculty record with resolved courses (missing ones skipped) and experience."""
        if courses_by_id is None:
            courses_by_id = await self._course_repo.get_many(record.course_ids)
        courses = [courses_by_id[c] for c in record.course_ids if c in courses_by_id]
        return FacultySummary(
            record=record,
            courses=courses,
            experience=whole_years_since(record.experience_start()),
        )

    # ---- signed-in user ----

    async def get_user_overview(self, subject_id: str) -> UserOverview:
        """Return the record linked to subject_id. Raises ResourceNotFoundException."""
        record = await self._directory_repo.find_by_subject_id(subject_id)
        if record is None:
            raise ResourceNotFoundException("user", subject_id)
        found = await self._course_repo.get_many(record.course_ids)
        courses = [found[c] for c in record.course_ids if c in found]
        experience = (
            whole_years_since(record.experience_start())
            if record.role == Role.FACULTY
            else None
        )
        return UserOverview(record=record, courses=courses, experience=experience)

    # ---- students ----

    async def list_students(self) -> list[DirectoryRecord]:
        return await self._directory_repo.list_by_role(Role.STUDENT)

    async def create_student(self, data: StudentCreate) -> DirectoryRecord:
        email = self._institutional_email(data.email)
        await self._ensure_email_free(email)
        course_ids = normalize_course_ids(data.course_ids)
        await resolve_course_ids(self._course_repo, course_ids)
        now = utc_now()
        record = DirectoryRecord(
            id=generate_cuid(),
            email=email,
            role=Role.STUDENT,
            join_date=now,
            created_at=now,
            updated_at=now,
            display_name=(data.name or "").strip() or None,
            course_ids=course_ids,
        )
        await self._directory_repo.create(record)
        logger.info("Student provisioned: id=%s", record.id)
        return record

    async def update_student(self, record_id: str, data: StudentUpdate) -> DirectoryRecord:
        record = await self._get_with_role(record_id, Role.STUDENT)
        if data.email is not None:
            email = self._institutional_email(data.email)
            if email != record.email:
                await self._ensure_email_free(email, record.id)
                record.email = email
        if data.name is not None:
            record.display_name = data.name.strip() or None
        if data.join_date is not None:
            record.join_date = ensure_utc(data.join_date)
        if data.course_ids is not None:
            course_ids = normalize_course_ids(data.course_ids)
            await resolve_course_ids(self._course_repo, course_ids)
            record.assign_courses(course_ids)
        return await self._directory_repo.save(record)

    async def delete_student(self, record_id: str) -> None:
        await self._get_with_role(record_id, Role.STUDENT)
        await self._directory_repo.delete(record_id)
        logger.info("Student deleted: id=%s", record_id)

    # ---- faculty ----

    async def list_faculty(self) -> list[FacultySummary]:
        records = await self._directory_repo.list_by_role(Role.FACULTY)
        all_ids = [cid for r in records for cid in r.course_ids]
        courses_by_id = await self._course_repo.get_many(all_ids)
        return [await self.summarize_faculty(r, courses_by_id) for r in records]

    async def create_faculty(self, data: FacultyCreate) -> FacultySummary:
        """Provision a faculty member with 1-4 existing courses."""
        email = self._institutional_email(data.email)
        course_ids = normalize_course_ids(data.course_ids)
        now = utc_now()
        record = DirectoryRecord(
            id=generate_cuid(),
            email=email,
            role=Role.FACULTY,
            join_date=ensure_utc(data.join_date) or now,
            created_at=now,
            updated_at=now,
            display_name=(data.name or "").strip() or None,
            course_ids=course_ids,
        )
        courses = await resolve_course_ids(self._course_repo, record.course_ids)
        await self._ensure_email_free(email)
        await self._directory_repo.create(record)
        logger.info("Faculty provisioned: id=%s courses=%d", record.id, len(courses))
        return await self.summarize_faculty(record, {c.id: c for c in courses})

    async def update_faculty(self, record_id: str, data: FacultyUpdate) -> FacultySummary:
        if data.course_ids is None and data.join_date is None:
            raise ValidationException("Provide courseIds or joinDate to update")
        record = await self._get_with_role(record_id, Role.FACULTY)
        if data.course_ids is not None:
            course_ids = normalize_course_ids(data.course_ids)
            record.assign_courses(course_ids)
            await resolve_course_ids(self._course_repo, course_ids)
        if data.join_date is not None:
            record.join_date = ensure_utc(data.join_date)
        record = await self._directory_repo.save(record)
        return await self.summarize_faculty(record)

    async def delete_faculty(self, record_id: str) -> None:
        await self._get_with_role(record_id, Role.FACULTY)
        await self._directory_repo.delete(record_id)
        logger.info("Faculty deleted: id=%s", record_id)
