"""In-memory document store, uniqueness guards and the directory repository."""

import asyncio
from datetime import datetime, timezone

import pytest

from portal.domain.entities.directory import DirectoryRecord
from portal.domain.enums import Role
from portal.domain.exceptions import PersistenceConflictException
from portal.infrastructure.firebase._rest_client import DocumentExistsError
from portal.infrastructure.firebase.repositories._guards import claim, guard_id, read_owner, release

NOW = datetime(2025, 3, 1, tzinfo=timezone.utc)


def _record(record_id: str, email: str, subject_id: str | None = None) -> DirectoryRecord:
    return DirectoryRecord(
        id=record_id,
        email=email,
        role=Role.STUDENT,
        join_date=NOW,
        created_at=NOW,
        updated_at=NOW,
        external_subject_id=subject_id,
    )


async def test_create_if_absent(memory_db) -> None:
    coll = memory_db.collection("things")
    await coll.create("a", {"v": 1})
    with pytest.raises(DocumentExistsError):
        await coll.create("a", {"v": 2})
    assert (await coll.document("a").get()).to_dict() == {"v": 1}


async def test_documents_are_copied(memory_db) -> None:
    coll = memory_db.collection("things")
    data = {"tags": ["x"]}
    await coll.document("a").set(data)
    data["tags"].append("y")
    snapshot = await coll.document("a").get()
    snapshot.to_dict()["tags"].append("z")
    assert (await coll.document("a").get()).to_dict() == {"tags": ["x"]}


async def test_query_filter_order_limit(memory_db) -> None:
    coll = memory_db.collection("things")
    for i, tags in enumerate([["a"], ["a", "b"], ["b"]]):
        await coll.document(f"d{i}").set({"n": i, "tags": tags})
    hits = [s.id async for s in coll.where("tags", "array_contains", "a").stream()]
    assert sorted(hits) == ["d0", "d1"]
    ordered = [s.id async for s in coll.order_by("n", "DESCENDING").limit(2).stream()]
    assert ordered == ["d2", "d1"]


async def test_guard_claim_is_idempotent_per_owner(memory_db) -> None:
    guards = memory_db.collection("guards")
    await claim(guards, "jane@ddu.ac.in", "r1", "email")
    await claim(guards, "jane@ddu.ac.in", "r1", "email")
    with pytest.raises(PersistenceConflictException):
        await claim(guards, "jane@ddu.ac.in", "r2", "email")
    assert await read_owner(guards, "jane@ddu.ac.in") == "r1"
    await release(guards, "jane@ddu.ac.in", "r2")
    assert await read_owner(guards, "jane@ddu.ac.in") == "r1"
    await release(guards, "jane@ddu.ac.in", "r1")
    assert await read_owner(guards, "jane@ddu.ac.in") is None


def test_guard_id_is_a_safe_document_id() -> None:
    doc_id = guard_id("a/b c@ddu.ac.in")
    assert len(doc_id) == 64
    assert "/" not in doc_id


async def test_concurrent_creates_same_email_one_wins(directory_repo) -> None:
    results = await asyncio.gather(
        directory_repo.create(_record("r1", "student1@ddu.ac.in", "u1")),
        directory_repo.create(_record("r2", "student1@ddu.ac.in", "u2")),
        return_exceptions=True,
    )
    conflicts = [r for r in results if isinstance(r, PersistenceConflictException)]
    assert len(conflicts) == 1
    winner = await directory_repo.find_by_email("student1@ddu.ac.in")
    assert winner is not None
    # the loser's subject claim was never made or was rolled back
    loser_subject = "u2" if winner.id == "r1" else "u1"
    assert await directory_repo.find_by_subject_id(loser_subject) is None


async def test_subject_conflict_rolls_back_email_claim(directory_repo) -> None:
    await directory_repo.create(_record("r1", "a@ddu.ac.in", "u1"))
    with pytest.raises(PersistenceConflictException):
        await directory_repo.create(_record("r2", "b@ddu.ac.in", "u1"))
    # b@ is free again
    await directory_repo.create(_record("r3", "b@ddu.ac.in", "u3"))


async def test_save_moves_email_guard(directory_repo) -> None:
    record = await directory_repo.create(_record("r1", "old@ddu.ac.in"))
    record.email = "new@ddu.ac.in"
    await directory_repo.save(record)
    await directory_repo.create(_record("r2", "old@ddu.ac.in"))
    with pytest.raises(PersistenceConflictException):
        await directory_repo.create(_record("r3", "new@ddu.ac.in"))


async def test_delete_releases_guards(directory_repo) -> None:
    await directory_repo.create(_record("r1", "a@ddu.ac.in", "u1"))
    assert await directory_repo.delete("r1") is True
    assert await directory_repo.delete("r1") is False
    await directory_repo.create(_record("r2", "a@ddu.ac.in", "u1"))
    assert (await directory_repo.find_by_subject_id("u1")).id == "r2"


async def test_list_and_count_by_role(directory_repo) -> None:
    await directory_repo.create(_record("r1", "a@ddu.ac.in"))
    await directory_repo.create(_record("r2", "b@ddu.ac.in"))
    assert await directory_repo.count_by_role(Role.STUDENT) == 2
    assert await directory_repo.count_by_role(Role.FACULTY) == 0
    assert [r.id for r in await directory_repo.list_by_role(Role.STUDENT)] == ["r1", "r2"]
