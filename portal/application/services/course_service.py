"""Course catalog service: list, create, rename, delete."""

from __future__ import annotations

import logging

from portal.application.dtos.course import CourseCreate, CourseUpdate
from portal.application.interfaces.repositories import (
    ICourseRepository,
    IDirectoryRepository,
)
from portal.domain.entities.course import Course, normalize_course_name
from portal.domain.enums import Role
from portal.domain.exceptions import (
    AlreadyExistsException,
    CourseInUseException,
    ResourceNotFoundException,
    ValidationException,
)
from portal.shared.utils import generate_cuid, utc_now

logger = logging.getLogger(__name__)


async def resolve_course_ids(
    course_repo: ICourseRepository, course_ids: list[str]
) -> list[Course]:
    """Return courses for course_ids in the given order.

    Raises:
        ValidationException: any id does not name an existing course.
    """
    found = await course_repo.get_many(course_ids)
    missing = [cid for cid in course_ids if cid not in found]
    if missing:
        raise ValidationException(
            f"Unknown course id(s): {', '.join(missing)}", field="course_ids"
        )
    return [found[cid] for cid in course_ids]


class CourseService:
    """Course CRUD. Deletion keeps every faculty member at one course or more."""

    def __init__(
        self,
        course_repo: ICourseRepository,
        directory_repo: IDirectoryRepository,
    ) -> None:
        self._course_repo = course_repo
        self._directory_repo = directory_repo

    async def list_courses(self) -> list[Course]:
        return await self._course_repo.list_all()

    async def create_course(self, data: CourseCreate) -> Course:
        """Create a course. Raises AlreadyExistsException on a duplicate name."""
        name = (data.name or "").strip()
        if not name:
            raise ValidationException("Course name is required", field="name")
        if await self._course_repo.find_by_name(name) is not None:
            raise AlreadyExistsException("Course", "name", name)
        now = utc_now()
        course = Course(
            id=generate_cuid(),
            name=name,
            description=data.description or "",
            created_at=now,
            updated_at=now,
        )
        await self._course_repo.create(course)
        logger.info("Course created: id=%s", course.id)
        return course

    async def update_course(self, course_id: str, data: CourseUpdate) -> Course:
        name = (data.name or "").strip()
        if not name:
            raise ValidationException("Course name is required", field="name")
        course = await self._course_repo.get_by_id(course_id)
        if course is None:
            raise ResourceNotFoundException("course", course_id)
        previous_key = course.name_key
        if normalize_course_name(name) != previous_key:
            other = await self._course_repo.find_by_name(name)
            if other is not None and other.id != course_id:
                raise AlreadyExistsException("Course", "name", name)
        course.name = name
        if data.description is not None:
            course.description = data.description
        course.validate()
        return await self._course_repo.save(course, previous_name_key=previous_key)

    async def delete_course(self, course_id: str) -> None:
        """Delete a course and drop it from every directory record.

        Raises:
            ResourceNotFoundException: no such course.
            CourseInUseException: it is the only course of some faculty member.
        """
        course = await self._course_repo.get_by_id(course_id)
        if course is None:
            raise ResourceNotFoundException("course", course_id)
        holders = await self._directory_repo.list_by_course(course_id)
        sole = [
            r.id for r in holders
            if r.role == Role.FACULTY and r.course_ids == [course_id]
        ]
        if sole:
            raise CourseInUseException(course_id, sole)
        for record in holders:
            if record.remove_course(course_id):
                await self._directory_repo.save(record)
        await self._course_repo.delete(course_id)
        logger.info("Course deleted: id=%s (unlinked from %d records)", course_id, len(holders))
