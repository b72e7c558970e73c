"""Pytest configuration and fixtures for the resource portal.

HTTP tests run portal.main:app over ASGITransport against a fresh in-memory
document store per test. The identity provider is replaced with
FakeIdentityProvider through app.dependency_overrides.
"""

import os
import tempfile

# Settings are read when portal.main is imported; configure the env first.
os.environ["DATABASE_BACKEND"] = "memory"
os.environ["CLERK_SECRET_KEY"] = "sk_test_portal"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="portal-storage-")
os.environ["STORAGE_BASE_URL"] = "http://test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["TELEMETRY_ENABLED"] = "false"
os.environ["INSTITUTION_DOMAIN"] = "ddu.ac.in"
os.environ["FACULTY_DEPARTMENT_CODES"] = "it,ce,ec,ic,ch,mh,cl"
os.environ["ALLOW_SELF_REGISTRATION"] = "false"
os.environ["SIGN_IN_TOKEN_SOURCE"] = "header"

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from portal.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from portal.api.dependencies import get_identity_provider, get_storage  # noqa: E402
from portal.application.dtos.identity import IdentityProfile  # noqa: E402
from portal.domain.entities.course import Course  # noqa: E402
from portal.domain.entities.directory import DirectoryRecord  # noqa: E402
from portal.domain.enums import AuthFailureReason, Role  # noqa: E402
from portal.domain.exceptions import (  # noqa: E402
    AuthenticationException,
    IdentityProviderException,
)
from portal.infrastructure.external.storage.local_storage import (  # noqa: E402
    LocalStorageService,
)
from portal.infrastructure.firebase.client import set_document_client  # noqa: E402
from portal.infrastructure.firebase.memory_client import MemoryDocumentClient  # noqa: E402
from portal.infrastructure.firebase.repositories import (  # noqa: E402
    FirestoreCourseRepository,
    FirestoreDirectoryRepository,
)
from portal.main import app  # noqa: E402
from portal.shared.utils import generate_cuid  # noqa: E402


class FakeIdentityProvider:
    """In-process identity provider: token -> subject id, subject id -> profile."""

    def __init__(self) -> None:
        self.tokens: dict[str, str] = {}
        self.users: dict[str, IdentityProfile] = {}
        self.get_user_calls = 0

    def register(
        self,
        subject_id: str,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
        image_url: str | None = None,
    ) -> str:
        """Register a user and return a token that verifies to subject_id."""
        token = f"token-{subject_id}"
        self.tokens[token] = subject_id
        self.users[subject_id] = IdentityProfile(
            email=email, first_name=first_name, last_name=last_name, image_url=image_url
        )
        return token

    async def verify_token(self, credential: str) -> str:
        if credential not in self.tokens:
            raise AuthenticationException(AuthFailureReason.INVALID_CREDENTIAL)
        return self.tokens[credential]

    async def get_user(self, subject_id: str) -> IdentityProfile:
        self.get_user_calls += 1
        if subject_id not in self.users:
            raise IdentityProviderException()
        return self.users[subject_id]

    async def aclose(self) -> None:
        return None


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def memory_db():
    """Fresh in-memory document store installed as the process client."""
    db = MemoryDocumentClient()
    set_document_client(db)
    yield db
    set_document_client(None)


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def directory_repo(memory_db) -> FirestoreDirectoryRepository:
    return FirestoreDirectoryRepository(memory_db)


@pytest.fixture
def course_repo(memory_db) -> FirestoreCourseRepository:
    return FirestoreCourseRepository(memory_db)


@pytest.fixture
async def client(memory_db, identity, tmp_path) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) with fakes installed."""
    storage = LocalStorageService(storage_root=str(tmp_path), base_url="http://test")
    app.dependency_overrides[get_identity_provider] = lambda: identity
    app.dependency_overrides[get_storage] = lambda: storage
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_course(course_repo):
    """Factory: persist a course and return it."""

    async def _make(name: str, description: str = "") -> Course:
        now = datetime.now(timezone.utc)
        course = Course(
            id=generate_cuid(), name=name, description=description, created_at=now, updated_at=now
        )
        return await course_repo.create(course)

    return _make


@pytest.fixture
def make_user(directory_repo, identity):
    """Factory: persist a linked directory record and return (record, auth headers)."""

    async def _make(
        role: Role,
        email: str,
        course_ids: list[str] | None = None,
        display_name: str | None = None,
        join_date: datetime | None = None,
    ) -> tuple[DirectoryRecord, dict[str, str]]:
        subject_id = f"user_{generate_cuid()}"
        token = identity.register(subject_id, email)
        now = datetime.now(timezone.utc)
        record = DirectoryRecord(
            id=generate_cuid(),
            email=email,
            role=role,
            join_date=join_date or now,
            created_at=now,
            updated_at=now,
            external_subject_id=subject_id,
            display_name=display_name,
            course_ids=course_ids or [],
        )
        await directory_repo.create(record)
        return record, bearer(token)

    return _make


@pytest.fixture
async def admin(make_user) -> tuple[DirectoryRecord, dict[str, str]]:
    return await make_user(Role.ADMIN, "admin@ddu.ac.in", display_name="Portal Admin")
