"""DirectoryService: student and faculty administration, get-user overview."""

from datetime import datetime, timedelta, timezone

import pytest

from portal.application.dtos.directory import (
    NOT_ASSIGNED,
    FacultyCreate,
    FacultyUpdate,
    StudentCreate,
    StudentUpdate,
)
from portal.application.services.directory_service import DirectoryService
from portal.domain.enums import Role
from portal.domain.exceptions import (
    AlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from portal.domain.role_resolver import RoleResolver, RoleRules


@pytest.fixture
def service(directory_repo, course_repo) -> DirectoryService:
    resolver = RoleResolver(RoleRules.from_values("ddu.ac.in", ["it", "ce"]))
    return DirectoryService(directory_repo, course_repo, resolver)


async def test_create_student_normalizes_email(service: DirectoryService) -> None:
    record = await service.create_student(StudentCreate(email=" Student1@DDU.ac.in ", name="Ravi"))
    assert record.email == "student1@ddu.ac.in"
    assert record.role == Role.STUDENT
    assert record.display_name == "Ravi"
    assert record.external_subject_id is None


async def test_create_student_outside_domain_rejected(service: DirectoryService) -> None:
    with pytest.raises(ValidationException):
        await service.create_student(StudentCreate(email="someone@gmail.com"))


async def test_create_student_duplicate_rejected(service: DirectoryService) -> None:
    await service.create_student(StudentCreate(email="student1@ddu.ac.in"))
    with pytest.raises(AlreadyExistsException):
        await service.create_student(StudentCreate(email="STUDENT1@ddu.ac.in"))


async def test_create_student_unknown_course_rejected(service: DirectoryService) -> None:
    with pytest.raises(ValidationException):
        await service.create_student(StudentCreate(email="s2@ddu.ac.in", course_ids=["nope"]))


async def test_update_student_moves_email(service: DirectoryService, directory_repo) -> None:
    record = await service.create_student(StudentCreate(email="old@ddu.ac.in"))
    await service.update_student(record.id, StudentUpdate(email="new@ddu.ac.in"))
    assert await directory_repo.find_by_email("old@ddu.ac.in") is None
    assert (await directory_repo.find_by_email("new@ddu.ac.in")).id == record.id
    # old address is free again
    await service.create_student(StudentCreate(email="old@ddu.ac.in"))


async def test_update_student_onto_taken_email(service: DirectoryService) -> None:
    await service.create_student(StudentCreate(email="a@ddu.ac.in"))
    b = await service.create_student(StudentCreate(email="b@ddu.ac.in"))
    with pytest.raises(AlreadyExistsException):
        await service.update_student(b.id, StudentUpdate(email="a@ddu.ac.in"))


async def test_student_operations_refuse_faculty(service: DirectoryService, make_course) -> None:
    course = await make_course("Maths")
    faculty = await service.create_faculty(
        FacultyCreate(email="prof.it@ddu.ac.in", course_ids=[course.id])
    )
    with pytest.raises(ValidationException):
        await service.update_student(faculty.record.id, StudentUpdate(name="x"))
    with pytest.raises(ValidationException):
        await service.delete_student(faculty.record.id)


async def test_delete_missing_student(service: DirectoryService) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.delete_student("missing")


async def test_create_faculty_with_courses(service: DirectoryService, make_course) -> None:
    maths = await make_course("Maths")
    physics = await make_course("Physics")
    join = datetime.now(timezone.utc) - timedelta(days=365 * 3 + 10)
    summary = await service.create_faculty(
        FacultyCreate(
            email="prof.it@ddu.ac.in", course_ids=[maths.id, physics.id], join_date=join
        )
    )
    assert summary.record.role == Role.FACULTY
    assert summary.experience == 3
    assert summary.course_names == "Maths, Physics"


@pytest.mark.parametrize("count", [0, 5])
async def test_create_faculty_course_count_enforced(
    service: DirectoryService, directory_repo, make_course, count: int
) -> None:
    ids = [(await make_course(f"Course {i}")).id for i in range(count)]
    with pytest.raises(ValidationException):
        await service.create_faculty(FacultyCreate(email="prof.ce@ddu.ac.in", course_ids=ids))
    assert await directory_repo.find_by_email("prof.ce@ddu.ac.in") is None


async def test_create_faculty_unknown_course_rejected(
    service: DirectoryService, directory_repo
) -> None:
    with pytest.raises(ValidationException):
        await service.create_faculty(FacultyCreate(email="prof.ce@ddu.ac.in", course_ids=["nope"]))
    assert await directory_repo.find_by_email("prof.ce@ddu.ac.in") is None


async def test_update_faculty_requires_a_field(service: DirectoryService) -> None:
    with pytest.raises(ValidationException):
        await service.update_faculty("any", FacultyUpdate())


async def test_update_faculty_courses(service: DirectoryService, make_course) -> None:
    a = await make_course("A")
    b = await make_course("B")
    summary = await service.create_faculty(FacultyCreate(email="prof.it@ddu.ac.in", course_ids=[a.id]))
    updated = await service.update_faculty(summary.record.id, FacultyUpdate(course_ids=[b.id]))
    assert updated.record.course_ids == [b.id]
    with pytest.raises(ValidationException):
        await service.update_faculty(summary.record.id, FacultyUpdate(course_ids=[]))


@pytest.mark.parametrize("count", [0, 5])
async def test_update_faculty_course_count_enforced(
    service: DirectoryService, directory_repo, make_course, count: int
) -> None:
    first = await make_course("First")
    summary = await service.create_faculty(
        FacultyCreate(email="prof.it@ddu.ac.in", course_ids=[first.id])
    )
    ids = [(await make_course(f"Course {i}")).id for i in range(count)]
    with pytest.raises(ValidationException):
        await service.update_faculty(summary.record.id, FacultyUpdate(course_ids=ids))
    stored = await directory_repo.get_by_id(summary.record.id)
    assert stored.course_ids == [first.id]


async def test_summary_without_live_courses_is_not_assigned(
    service: DirectoryService, make_course, course_repo
) -> None:
    course = await make_course("Gone")
    summary = await service.create_faculty(FacultyCreate(email="prof.it@ddu.ac.in", course_ids=[course.id]))
    await course_repo.delete(course.id)
    refreshed = await service.summarize_faculty(summary.record)
    assert refreshed.course_names == NOT_ASSIGNED


async def test_delete_faculty(service: DirectoryService, directory_repo, make_course) -> None:
    course = await make_course("A")
    summary = await service.create_faculty(FacultyCreate(email="prof.it@ddu.ac.in", course_ids=[course.id]))
    await service.delete_faculty(summary.record.id)
    assert await directory_repo.get_by_id(summary.record.id) is None
    with pytest.raises(ResourceNotFoundException):
        await service.delete_faculty(summary.record.id)


async def test_user_overview_experience_only_for_faculty(
    service: DirectoryService, make_user, make_course
) -> None:
    course = await make_course("A")
    student, _ = await make_user(Role.STUDENT, "student1@ddu.ac.in", course_ids=[course.id])
    faculty, _ = await make_user(Role.FACULTY, "prof.it@ddu.ac.in", course_ids=[course.id])

    student_view = await service.get_user_overview(student.external_subject_id)
    assert student_view.experience is None
    assert [c.name for c in student_view.courses] == ["A"]

    faculty_view = await service.get_user_overview(faculty.external_subject_id)
    assert faculty_view.experience == 0


async def test_user_overview_unknown_subject(service: DirectoryService) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.get_user_overview("nobody")
