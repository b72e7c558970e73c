"""Email-to-role resolution.

Maps a verified email address to the access tier it may hold, using the
institution's domain and its department codes. Pure and deterministic:
every string maps to student, faculty, or None.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from portal.domain.enums import Role


@dataclass(frozen=True)
class RoleRules:
    """Institution domain rules used by RoleResolver.

    institution_domain: e.g. "ddu.ac.in"; sub-domains are accepted too.
    faculty_department_codes: department codes (e.g. "it", "ce") that mark
        a faculty address either as a local-part suffix (prof.it@ddu.ac.in)
        or as a department sub-domain (x@it.ddu.ac.in).
    """

    institution_domain: str
    faculty_department_codes: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        domain = self.institution_domain.strip().lower().lstrip("@")
        if not domain:
            raise ValueError("institution_domain must be a non-empty string")
        object.__setattr__(self, "institution_domain", domain)
        object.__setattr__(
            self,
            "faculty_department_codes",
            frozenset(c.strip().lower() for c in self.faculty_department_codes if c.strip()),
        )

    @classmethod
    def from_values(cls, institution_domain: str, department_codes: Iterable[str]) -> "RoleRules":
        return cls(institution_domain, frozenset(department_codes))


def normalize_email(email: str) -> str:
    """Return the lower-cased, stripped form used for storage and comparison."""
    return email.strip().lower()


class RoleResolver:
    """Resolve an email address to Role.STUDENT, Role.FACULTY, or None.

    None means the address is outside the institution and must be
    rejected; it is never a role. Admin is never produced here.
    """

    def __init__(self, rules: RoleRules) -> None:
        self._rules = rules

    @property
    def rules(self) -> RoleRules:
        return self._rules

    def resolve(self, email: str) -> Role | None:
        if not isinstance(email, str):
            return None
        normalized = normalize_email(email)
        if normalized.count("@") != 1:
            return None
        local, domain = normalized.split("@")
        if not local or not domain:
            return None

        institution = self._rules.institution_domain
        if domain == institution:
            sub_domain = ""
        elif domain.endswith("." + institution):
            sub_domain = domain[: -len(institution) - 1]
        else:
            return None

        codes = self._rules.faculty_department_codes
        if sub_domain in codes:
            return Role.FACULTY
        if "." in local and local.rsplit(".", 1)[1] in codes:
            return Role.FACULTY
        return Role.STUDENT
