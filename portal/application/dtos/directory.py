"""DTOs for sign-in, student and faculty administration use cases."""

from dataclasses import dataclass, field
from datetime import datetime

from portal.domain.entities.course import Course
from portal.domain.entities.directory import DirectoryRecord

NOT_ASSIGNED = "Not Assigned"


@dataclass(frozen=True)
class SignInResult:
    """Outcome of a successful sign-in.

    created: a record was self-registered during this sign-in.
    backfilled: profile fields were populated during this sign-in.
    """

    record: DirectoryRecord
    created: bool = False
    backfilled: bool = False


@dataclass(frozen=True)
class StudentCreate:
    email: str
    name: str | None = None
    course_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class StudentUpdate:
    """Fields left as None are not changed."""

    name: str | None = None
    email: str | None = None
    join_date: datetime | None = None
    course_ids: list[str] | None = None


@dataclass(frozen=True)
class FacultyCreate:
    email: str
    course_ids: list[str]
    join_date: datetime | None = None
    name: str | None = None


@dataclass(frozen=True)
class FacultyUpdate:
    """At least one of course_ids or join_date must be given."""

    course_ids: list[str] | None = None
    join_date: datetime | None = None


@dataclass(frozen=True)
class FacultySummary:
    """Faculty record with its courses and derived whole years of experience."""

    record: DirectoryRecord
    courses: list[Course]
    experience: int

    @property
    def course_names(self) -> str:
        return ", ".join(c.name for c in self.courses) or NOT_ASSIGNED


@dataclass(frozen=True)
class FacultyProfile:
    summary: FacultySummary
    materials_count: int
    papers_count: int


@dataclass(frozen=True)
class UserOverview:
    """The signed-in user's record with course details; experience only for faculty."""

    record: DirectoryRecord
    courses: list[Course]
    experience: int | None = None
