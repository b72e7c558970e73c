"""Domain enumerations for the resource portal.

Roles, gated actions, and the reasons an authentication or authorization
decision can fail.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class Role(_ValuesMixin, str, Enum):
    """Role held by a directory record.

    Admin is only ever assigned by provisioning, never derived from an email.
    """

    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"


class Action(_ValuesMixin, str, Enum):
    """Operations guarded by the authorization gate."""

    COURSE_LIST = "course:list"
    COURSE_CREATE = "course:create"
    COURSE_UPDATE = "course:update"
    COURSE_DELETE = "course:delete"

    STUDENT_LIST = "student:list"
    STUDENT_CREATE = "student:create"
    STUDENT_UPDATE = "student:update"
    STUDENT_DELETE = "student:delete"

    FACULTY_LIST = "faculty:list"
    FACULTY_CREATE = "faculty:create"
    FACULTY_UPDATE = "faculty:update"
    FACULTY_DELETE = "faculty:delete"
    FACULTY_VIEW_PROFILE = "faculty:view_profile"
    FACULTY_VIEW_DASHBOARD = "faculty:view_dashboard"

    MATERIAL_LIST = "material:list"
    MATERIAL_CREATE = "material:create"
    MATERIAL_UPDATE = "material:update"
    MATERIAL_DELETE = "material:delete"

    PAPER_LIST = "paper:list"
    PAPER_CREATE = "paper:create"
    PAPER_UPDATE = "paper:update"
    PAPER_DELETE = "paper:delete"

    FILE_UPLOAD = "file:upload"
    ADMIN_VIEW_DASHBOARD = "admin:view_dashboard"


class AuthFailureReason(_ValuesMixin, str, Enum):
    """Why the session authenticator rejected a request."""

    NO_CREDENTIAL = "NoCredential"
    INVALID_CREDENTIAL = "InvalidCredential"


class DenyReason(_ValuesMixin, str, Enum):
    """Why the authorization gate denied an action."""

    ROLE_NOT_PERMITTED = "RoleNotPermitted"
    OWNERSHIP_MISMATCH = "OwnershipMismatch"
