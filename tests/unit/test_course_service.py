"""CourseService against the in-memory document store."""

import pytest

from portal.application.dtos.course import CourseCreate, CourseUpdate
from portal.application.services.course_service import CourseService, resolve_course_ids
from portal.domain.enums import Role
from portal.domain.exceptions import (
    AlreadyExistsException,
    CourseInUseException,
    ResourceNotFoundException,
    ValidationException,
)


@pytest.fixture
def service(course_repo, directory_repo) -> CourseService:
    return CourseService(course_repo, directory_repo)


async def test_create_and_list_sorted_by_name(service: CourseService) -> None:
    await service.create_course(CourseCreate(name="Operating Systems"))
    await service.create_course(CourseCreate(name="algorithms", description="Intro"))
    names = [c.name for c in await service.list_courses()]
    assert names == ["algorithms", "Operating Systems"]


async def test_blank_name_rejected(service: CourseService) -> None:
    with pytest.raises(ValidationException):
        await service.create_course(CourseCreate(name="   "))


async def test_duplicate_name_is_case_insensitive(service: CourseService) -> None:
    await service.create_course(CourseCreate(name="Data Structures"))
    with pytest.raises(AlreadyExistsException):
        await service.create_course(CourseCreate(name="data  structures"))


async def test_rename_frees_old_name(service: CourseService) -> None:
    course = await service.create_course(CourseCreate(name="Networks"))
    renamed = await service.update_course(course.id, CourseUpdate(name="Computer Networks"))
    assert renamed.name == "Computer Networks"
    again = await service.create_course(CourseCreate(name="Networks"))
    assert again.id != course.id


async def test_rename_onto_existing_name_rejected(service: CourseService) -> None:
    await service.create_course(CourseCreate(name="Compilers"))
    other = await service.create_course(CourseCreate(name="Databases"))
    with pytest.raises(AlreadyExistsException):
        await service.update_course(other.id, CourseUpdate(name="compilers"))


async def test_update_keeps_description_when_omitted(service: CourseService) -> None:
    course = await service.create_course(CourseCreate(name="Graphics", description="2D and 3D"))
    updated = await service.update_course(course.id, CourseUpdate(name="Graphics"))
    assert updated.description == "2D and 3D"


async def test_update_missing_course(service: CourseService) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.update_course("missing", CourseUpdate(name="X"))


async def test_delete_sole_course_of_faculty_rejected(
    service: CourseService, make_user, directory_repo
) -> None:
    course = await service.create_course(CourseCreate(name="Signals"))
    faculty, _ = await make_user(Role.FACULTY, "prof.ec@ddu.ac.in", course_ids=[course.id])
    with pytest.raises(CourseInUseException) as exc_info:
        await service.delete_course(course.id)
    assert exc_info.value.details["faculty_ids"] == [faculty.id]
    assert await directory_repo.get_by_id(faculty.id) is not None


async def test_delete_unlinks_course_from_records(
    service: CourseService, make_user, directory_repo, course_repo
) -> None:
    keep = await service.create_course(CourseCreate(name="Physics"))
    drop = await service.create_course(CourseCreate(name="Chemistry"))
    faculty, _ = await make_user(
        Role.FACULTY, "prof.ch@ddu.ac.in", course_ids=[keep.id, drop.id]
    )
    student, _ = await make_user(Role.STUDENT, "student1@ddu.ac.in", course_ids=[drop.id])

    await service.delete_course(drop.id)

    assert await course_repo.get_by_id(drop.id) is None
    assert (await directory_repo.get_by_id(faculty.id)).course_ids == [keep.id]
    assert (await directory_repo.get_by_id(student.id)).course_ids == []


async def test_delete_missing_course(service: CourseService) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.delete_course("missing")


async def test_resolve_course_ids_reports_unknown(service: CourseService, course_repo) -> None:
    course = await service.create_course(CourseCreate(name="Maths"))
    assert [c.id for c in await resolve_course_ids(course_repo, [course.id])] == [course.id]
    with pytest.raises(ValidationException) as exc_info:
        await resolve_course_ids(course_repo, [course.id, "nope"])
    assert "nope" in exc_info.value.message
