"""Directory record domain entity.

One authorized person: email, role, course affiliations, and the profile
fields linked from the identity provider at first sign-in.
"""

from dataclasses import dataclass, field
from datetime import datetime

from portal.domain.enums import Role
from portal.domain.exceptions import ValidationException
from portal.domain.role_resolver import normalize_email

MAX_FACULTY_COURSES = 4


def normalize_course_ids(course_ids: list[str] | None) -> list[str]:
    """Return course ids stripped, without blanks, de-duplicated in first-seen order."""
    seen: dict[str, None] = {}
    for course_id in course_ids or []:
        value = (course_id or "").strip()
        if value:
            seen.setdefault(value, None)
    return list(seen)


def validate_course_count(role: Role, course_ids: list[str]) -> None:
    """Enforce the per-role course cardinality.

    Faculty hold 1-4 courses, admins hold none, students any number.
    """
    if role == Role.FACULTY:
        if not course_ids:
            raise ValidationException(
                "Faculty must be assigned at least one course", field="course_ids"
            )
        if len(course_ids) > MAX_FACULTY_COURSES:
            raise ValidationException(
                f"Faculty can be assigned at most {MAX_FACULTY_COURSES} courses",
                field="course_ids",
            )
    elif role == Role.ADMIN and course_ids:
        raise ValidationException("Admins cannot hold courses", field="course_ids")


@dataclass
class DirectoryRecord:
    """Domain entity for a directory record.

    Email is stored lower-cased. Validation runs on construction and
    whenever course assignments change.
    """

    id: str
    email: str
    role: Role
    join_date: datetime
    created_at: datetime
    updated_at: datetime
    external_subject_id: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
    course_ids: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.email = normalize_email(self.email or "")
        self.course_ids = normalize_course_ids(self.course_ids)
        self.validate()

    def validate(self) -> None:
        """Validate record invariants. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Record ID is required", field="id")
        if not self.email or self.email.count("@") != 1:
            raise ValidationException("A valid email is required", field="email")
        validate_course_count(self.role, self.course_ids)

    @property
    def is_linked(self) -> bool:
        return bool(self.external_subject_id)

    def backfill_profile(
        self,
        subject_id: str,
        display_name: str | None,
        avatar_url: str | None,
    ) -> bool:
        """Populate profile fields that are still unset.

        Fields already holding a value are left alone, so calling this
        again with the same identity changes nothing.

        Returns:
            True when at least one field was set.
        """
        changed = False
        if not self.external_subject_id:
            self.external_subject_id = subject_id
            changed = True
        if not self.display_name and display_name:
            self.display_name = display_name
            changed = True
        if not self.avatar_url and avatar_url:
            self.avatar_url = avatar_url
            changed = True
        return changed

    def assign_courses(self, course_ids: list[str]) -> None:
        """Replace course assignments, enforcing the role's cardinality."""
        normalized = normalize_course_ids(course_ids)
        validate_course_count(self.role, normalized)
        self.course_ids = normalized

    def remove_course(self, course_id: str) -> bool:
        """Drop one course reference. Returns True if it was present.

        Callers must check that a faculty record keeps at least one course.
        """
        if course_id not in self.course_ids:
            return False
        self.course_ids = [c for c in self.course_ids if c != course_id]
        return True

    def experience_start(self) -> datetime:
        """Date used for derived experience: join date, else creation time."""
        return self.join_date or self.created_at
