"""SignInService: domain gate, pre-provisioned matching, backfill, races."""

from datetime import datetime, timezone

import pytest

from portal.application.dtos.identity import IdentityProfile
from portal.application.services.sign_in_service import SignInService
from portal.domain.entities.directory import DirectoryRecord
from portal.domain.enums import Role
from portal.domain.exceptions import (
    DomainNotAllowedException,
    IdentityConflictException,
    IdentityProviderException,
    NotPreRegisteredException,
    PersistenceConflictException,
)
from portal.domain.role_resolver import RoleResolver, RoleRules

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


class StubProvider:
    def __init__(self, profiles: dict[str, IdentityProfile]) -> None:
        self.profiles = profiles

    async def verify_token(self, credential: str) -> str:
        return credential

    async def get_user(self, subject_id: str) -> IdentityProfile:
        if subject_id not in self.profiles:
            raise IdentityProviderException()
        return self.profiles[subject_id]

    async def aclose(self) -> None:
        return None


class ConflictOnceRepository:
    """Delegates to a real repository but loses the first write race."""

    def __init__(self, inner, winner: DirectoryRecord, conflicts: int = 1) -> None:
        self._inner = inner
        self._winner = winner
        self.conflicts = conflicts

    def __getattr__(self, name):
        return getattr(self._inner, name)

    async def create(self, record: DirectoryRecord) -> DirectoryRecord:
        if self.conflicts > 0:
            self.conflicts -= 1
            await self._inner.create(self._winner)
            raise PersistenceConflictException("email", record.email)
        return await self._inner.create(record)


def _resolver() -> RoleResolver:
    return RoleResolver(RoleRules.from_values("ddu.ac.in", ["it", "ce"]))


def _provisioned(email: str, role: Role, **overrides) -> DirectoryRecord:
    fields = dict(
        id=f"rec-{email}",
        email=email,
        role=role,
        join_date=NOW,
        created_at=NOW,
        updated_at=NOW,
        course_ids=["c1"] if role == Role.FACULTY else [],
    )
    fields.update(overrides)
    return DirectoryRecord(**fields)


def _service(provider, repo, **kwargs) -> SignInService:
    return SignInService(provider, repo, _resolver(), **kwargs)


async def test_outside_domain_is_rejected(directory_repo) -> None:
    provider = StubProvider({"u1": IdentityProfile(email="outsider@gmail.com")})
    with pytest.raises(DomainNotAllowedException):
        await _service(provider, directory_repo).sign_in("u1")
    assert await directory_repo.find_by_email("outsider@gmail.com") is None


async def test_unprovisioned_student_rejected_by_default(directory_repo) -> None:
    provider = StubProvider({"u1": IdentityProfile(email="student1@ddu.ac.in")})
    with pytest.raises(NotPreRegisteredException):
        await _service(provider, directory_repo).sign_in("u1")


async def test_self_registration_creates_student(directory_repo) -> None:
    provider = StubProvider(
        {"u1": IdentityProfile(email="Student1@ddu.ac.in", first_name="Asha", last_name="Patel")}
    )
    result = await _service(provider, directory_repo, allow_self_registration=True).sign_in("u1")
    assert result.created is True
    assert result.record.role == Role.STUDENT
    assert result.record.email == "student1@ddu.ac.in"
    assert result.record.display_name == "Asha Patel"
    assert (await directory_repo.find_by_subject_id("u1")).id == result.record.id


async def test_self_registration_never_creates_faculty(directory_repo) -> None:
    provider = StubProvider({"u1": IdentityProfile(email="prof.it@ddu.ac.in")})
    with pytest.raises(NotPreRegisteredException):
        await _service(provider, directory_repo, allow_self_registration=True).sign_in("u1")


async def test_preprovisioned_record_is_backfilled_once(directory_repo) -> None:
    await directory_repo.create(_provisioned("jane@ddu.ac.in", Role.STUDENT))
    provider = StubProvider(
        {"u1": IdentityProfile(email="jane@ddu.ac.in", first_name="Jane", image_url="https://img/j.png")}
    )
    service = _service(provider, directory_repo)

    first = await service.sign_in("u1")
    assert first.backfilled is True
    assert first.record.external_subject_id == "u1"
    assert first.record.display_name == "Jane"
    assert first.record.avatar_url == "https://img/j.png"

    second = await service.sign_in("u1")
    assert second.backfilled is False
    assert second.created is False
    assert second.record.id == first.record.id


async def test_directory_role_is_authoritative(directory_repo) -> None:
    """An admin record keeps its role even though the resolver says student."""
    await directory_repo.create(_provisioned("admin@ddu.ac.in", Role.ADMIN))
    provider = StubProvider({"u1": IdentityProfile(email="admin@ddu.ac.in")})
    result = await _service(provider, directory_repo).sign_in("u1")
    assert result.record.role == Role.ADMIN


async def test_record_linked_to_other_subject_conflicts(directory_repo) -> None:
    await directory_repo.create(
        _provisioned("jane@ddu.ac.in", Role.STUDENT, external_subject_id="u-original")
    )
    provider = StubProvider({"u-other": IdentityProfile(email="jane@ddu.ac.in")})
    with pytest.raises(IdentityConflictException):
        await _service(provider, directory_repo).sign_in("u-other")


async def test_subject_already_linked_elsewhere_conflicts_without_retry(directory_repo) -> None:
    await directory_repo.create(
        _provisioned("renamed@ddu.ac.in", Role.STUDENT, id="B", external_subject_id="u1")
    )
    await directory_repo.create(_provisioned("jane@ddu.ac.in", Role.STUDENT, id="A"))
    provider = StubProvider({"u1": IdentityProfile(email="jane@ddu.ac.in")})
    service = _service(provider, directory_repo, conflict_retries=5)
    with pytest.raises(IdentityConflictException):
        await service.sign_in("u1")
    unlinked = await directory_repo.get_by_id("A")
    assert unlinked.external_subject_id is None
    assert (await directory_repo.find_by_subject_id("u1")).id == "B"



async def test_self_registration_refused_when_subject_already_linked(directory_repo) -> None:
    await directory_repo.create(
        _provisioned("renamed@ddu.ac.in", Role.STUDENT, id="B", external_subject_id="u1")
    )
    provider = StubProvider({"u1": IdentityProfile(email="student9@ddu.ac.in")})
    service = _service(
        provider, directory_repo, allow_self_registration=True, conflict_retries=5
    )
    with pytest.raises(IdentityConflictException):
        await service.sign_in("u1")
    assert await directory_repo.find_by_email("student9@ddu.ac.in") is None

async def test_existing_profile_fields_are_not_overwritten(directory_repo) -> None:
    await directory_repo.create(
        _provisioned("jane@ddu.ac.in", Role.STUDENT, display_name="Dr. Jane")
    )
    provider = StubProvider({"u1": IdentityProfile(email="jane@ddu.ac.in", first_name="J")})
    result = await _service(provider, directory_repo).sign_in("u1")
    assert result.record.display_name == "Dr. Jane"


async def test_lost_race_is_retried_as_backfill(directory_repo) -> None:
    winner = _provisioned(
        "student1@ddu.ac.in", Role.STUDENT, id="winner", external_subject_id="u1"
    )
    repo = ConflictOnceRepository(directory_repo, winner)
    provider = StubProvider({"u1": IdentityProfile(email="student1@ddu.ac.in")})
    result = await _service(provider, repo, allow_self_registration=True).sign_in("u1")
    assert result.record.id == "winner"
    assert result.created is False
    assert repo.conflicts == 0


async def test_conflict_surfaces_when_retries_exhausted(directory_repo) -> None:
    class AlwaysConflicting:
        async def find_by_email(self, email):
            return None

        async def find_by_subject_id(self, subject_id):
            return None

        async def create(self, record):
            raise PersistenceConflictException("email", record.email)

    provider = StubProvider({"u1": IdentityProfile(email="student1@ddu.ac.in")})
    service = _service(
        provider, AlwaysConflicting(), allow_self_registration=True, conflict_retries=1
    )
    with pytest.raises(PersistenceConflictException):
        await service.sign_in("u1")


async def test_provider_failure_propagates(directory_repo) -> None:
    with pytest.raises(IdentityProviderException):
        await _service(StubProvider({}), directory_repo).sign_in("missing")
