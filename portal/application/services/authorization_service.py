"""Authorization gate: role and ownership checks for every guarded action.

Stateless and free of persistence. Ownership is always compared against
the acting record's id; callers pass the owner id read from the stored
resource, never one supplied by the client.
"""

from __future__ import annotations

from dataclasses import dataclass

from portal.domain.entities.directory import DirectoryRecord
from portal.domain.enums import Action, DenyReason, Role
from portal.domain.exceptions import AuthorizationException

_ALL = frozenset({Role.STUDENT, Role.FACULTY, Role.ADMIN})
_ADMIN = frozenset({Role.ADMIN})
_FACULTY = frozenset({Role.FACULTY})
_STAFF = frozenset({Role.FACULTY, Role.ADMIN})

ACTION_ROLES: dict[Action, frozenset[Role]] = {
    Action.COURSE_LIST: _ALL,
    Action.COURSE_CREATE: _ADMIN,
    Action.COURSE_UPDATE: _ADMIN,
    Action.COURSE_DELETE: _ADMIN,
    Action.STUDENT_LIST: _ADMIN,
    Action.STUDENT_CREATE: _ADMIN,
    Action.STUDENT_UPDATE: _ADMIN,
    Action.STUDENT_DELETE: _ADMIN,
    Action.FACULTY_LIST: _ADMIN,
    Action.FACULTY_CREATE: _ADMIN,
    Action.FACULTY_UPDATE: _ADMIN,
    Action.FACULTY_DELETE: _ADMIN,
    Action.FACULTY_VIEW_PROFILE: _STAFF,
    Action.FACULTY_VIEW_DASHBOARD: _STAFF,
    Action.MATERIAL_LIST: _ALL,
    Action.MATERIAL_CREATE: _FACULTY,
    Action.MATERIAL_UPDATE: _STAFF,
    Action.MATERIAL_DELETE: _STAFF,
    Action.PAPER_LIST: _ALL,
    Action.PAPER_CREATE: _FACULTY,
    Action.PAPER_UPDATE: _STAFF,
    Action.PAPER_DELETE: _STAFF,
    Action.FILE_UPLOAD: _STAFF,
    Action.ADMIN_VIEW_DASHBOARD: _ADMIN,
}

OWNER_SCOPED: frozenset[Action] = frozenset({
    Action.FACULTY_VIEW_PROFILE,
    Action.FACULTY_VIEW_DASHBOARD,
    Action.MATERIAL_UPDATE,
    Action.MATERIAL_DELETE,
    Action.PAPER_UPDATE,
    Action.PAPER_DELETE,
})


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization check. reason is None when allowed."""

    allowed: bool
    reason: DenyReason | None = None

    @classmethod
    def allow(cls) -> Decision:
        return cls(True)

    @classmethod
    def deny(cls, reason: DenyReason) -> Decision:
        return cls(False, reason)


class AuthorizationService:
    """Decides whether a directory record may perform an action."""

    def authorize(
        self,
        record: DirectoryRecord,
        action: Action,
        owner_id: str | None = None,
    ) -> Decision:
        """Return Allow, Deny(RoleNotPermitted) or Deny(OwnershipMismatch).

        owner_id is the owning faculty record id of the target resource.
        It is only consulted for owner-scoped actions and only for faculty;
        admins are not subject to ownership.
        """
        if record.role not in ACTION_ROLES.get(action, frozenset()):
            return Decision.deny(DenyReason.ROLE_NOT_PERMITTED)
        if (
            action in OWNER_SCOPED
            and record.role == Role.FACULTY
            and owner_id is not None
            and owner_id != record.id
        ):
            return Decision.deny(DenyReason.OWNERSHIP_MISMATCH)
        return Decision.allow()

    def require(
        self,
        record: DirectoryRecord,
        action: Action,
        owner_id: str | None = None,
    ) -> None:
        """Raise AuthorizationException when authorize() denies."""
        decision = self.authorize(record, action, owner_id)
        if not decision.allowed:
            raise AuthorizationException(action=action.value, reason=decision.reason)
