"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
Writes that touch a unique key (email, subject id, course name) raise
PersistenceConflictException when another entity holds the key. Services
check for existing owners first and report AlreadyExistsException; the
repository conflict covers writers that raced past that check.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from portal.domain.enums import Role

if TYPE_CHECKING:
    from portal.domain.entities.course import Course
    from portal.domain.entities.directory import DirectoryRecord
    from portal.domain.entities.resources import Material


class IDirectoryRepository(Protocol):
    """Protocol for directory record persistence."""

    async def get_by_id(self, record_id: str) -> DirectoryRecord | None:
        """Return record by id."""

    async def find_by_email(self, email: str) -> DirectoryRecord | None:
        """Return record by email (compared lower-cased)."""

    async def find_by_subject_id(self, subject_id: str) -> DirectoryRecord | None:
        """Return the record linked to an identity-provider subject id."""

    async def create(self, record: DirectoryRecord) -> DirectoryRecord:
        """Persist a new record, claiming its email (and subject id when set)."""

    async def save(self, record: DirectoryRecord) -> DirectoryRecord:
        """Upsert by id, moving unique-key guards when email or subject id changed."""

    async def delete(self, record_id: str) -> bool:
        """Hard-delete a record and release its keys. Returns False if missing."""

    async def list_by_role(self, role: Role) -> list[DirectoryRecord]:
        """Return all records holding role, oldest first."""

    async def list_by_course(self, course_id: str) -> list[DirectoryRecord]:
        """Return all records referencing course_id."""

    async def count_by_role(self, role: Role) -> int:
        """Return how many records hold role."""


class ICourseRepository(Protocol):
    """Protocol for course persistence."""

    async def get_by_id(self, course_id: str) -> Course | None:
        """Return course by id."""

    async def find_by_name(self, name: str) -> Course | None:
        """Return the course whose name matches case-insensitively."""

    async def get_many(self, course_ids: list[str]) -> dict[str, Course]:
        """Return existing courses keyed by id (missing ids are omitted)."""

    async def list_all(self) -> list[Course]:
        """Return all courses ordered by name."""

    async def create(self, course: Course) -> Course:
        """Persist a new course, claiming its name."""

    async def save(self, course: Course, previous_name_key: str | None = None) -> Course:
        """Update a course, moving the name guard when the name changed."""

    async def delete(self, course_id: str) -> bool:
        """Delete a course and release its name. Returns False if missing."""

    async def count(self) -> int:
        """Return the number of courses."""


class IResourceRepository(Protocol):
    """Protocol shared by the material and previous-year paper repositories."""

    async def get_by_id(self, item_id: str) -> Material | None:
        """Return item by id."""

    async def list_all(self) -> list[Material]:
        """Return all items, newest upload first."""

    async def list_by_faculty(self, faculty_id: str) -> list[Material]:
        """Return items owned by faculty_id, newest upload first."""

    async def list_recent(self, limit: int, faculty_id: str | None = None) -> list[Material]:
        """Return the newest items, optionally for one owner."""

    async def create(self, item: Material) -> Material:
        """Persist a new item."""

    async def save(self, item: Material) -> Material:
        """Overwrite an item by id."""

    async def delete(self, item_id: str) -> bool:
        """Delete an item. Returns False if missing."""

    async def count(self, faculty_id: str | None = None) -> int:
        """Return item count, optionally for one owner."""
