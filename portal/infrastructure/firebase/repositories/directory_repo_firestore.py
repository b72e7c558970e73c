"""Firestore-backed directory repository (implements IDirectoryRepository)."""

from __future__ import annotations

import logging
from typing import Any

from portal.domain.entities.directory import DirectoryRecord
from portal.domain.enums import Role
from portal.domain.role_resolver import normalize_email
from portal.infrastructure.firebase.collections import (
    COLLECTION_USER_EMAIL_INDEX,
    COLLECTION_USER_SUBJECT_INDEX,
    COLLECTION_USERS,
)
from portal.infrastructure.firebase.repositories._guards import claim, release
from portal.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

KEY_EMAIL = "email"
KEY_SUBJECT = "external_subject_id"


def _to_doc(record: DirectoryRecord) -> dict[str, Any]:
    return {
        "email": record.email,
        "external_subject_id": record.external_subject_id,
        "display_name": record.display_name,
        "avatar_url": record.avatar_url,
        "role": record.role.value,
        "course_ids": list(record.course_ids),
        "join_date": record.join_date,
        "created_at": record.created_at,
        "updated_at": record.updated_at,
    }


def _to_entity(doc_id: str, data: dict[str, Any]) -> DirectoryRecord:
    created_at = ensure_utc(data.get("created_at")) or utc_now()
    return DirectoryRecord(
        id=doc_id,
        email=data.get("email", ""),
        role=Role(data.get("role", Role.STUDENT.value)),
        join_date=ensure_utc(data.get("join_date")) or created_at,
        created_at=created_at,
        updated_at=ensure_utc(data.get("updated_at")) or created_at,
        external_subject_id=data.get("external_subject_id"),
        display_name=data.get("display_name"),
        avatar_url=data.get("avatar_url"),
        course_ids=list(data.get("course_ids") or []),
    )


class FirestoreDirectoryRepository:
    """Directory records in COLLECTION_USERS with email and subject-id guards.

    Works with both the Firestore REST client and the in-memory client.
    """

    def __init__(self, client: Any) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_USERS)
        self._emails = client.collection(COLLECTION_USER_EMAIL_INDEX)
        self._subjects = client.collection(COLLECTION_USER_SUBJECT_INDEX)

    async def _first(self, field: str, value: Any) -> DirectoryRecord | None:
        async for snapshot in self._coll.where(field, "==", value).limit(1).stream():
            return _to_entity(snapshot.id, snapshot.to_dict())
        return None

    async def get_by_id(self, record_id: str) -> DirectoryRecord | None:
        snapshot = await self._coll.document(record_id).get()
        if not snapshot:
            return None
        return _to_entity(snapshot.id, snapshot.to_dict())

    async def find_by_email(self, email: str) -> DirectoryRecord | None:
        normalized = normalize_email(email)
        if not normalized:
            return None
        return await self._first("email", normalized)

    async def find_by_subject_id(self, subject_id: str) -> DirectoryRecord | None:
        if not subject_id:
            return None
        return await self._first("external_subject_id", subject_id)

    async def create(self, record: DirectoryRecord) -> DirectoryRecord:
        """Claim the record's keys, then write it.

        Raises:
            PersistenceConflictException: email or subject id already claimed.
        """
        await claim(self._emails, record.email, record.id, KEY_EMAIL)
        if record.external_subject_id:
            try:
                await claim(self._subjects, record.external_subject_id, record.id, KEY_SUBJECT)
            except Exception:
                await release(self._emails, record.email, record.id)
                raise
        await self._coll.document(record.id).set(_to_doc(record))
        logger.info("Directory record created: id=%s role=%s", record.id, record.role.value)
        return record

    async def save(self, record: DirectoryRecord) -> DirectoryRecord:
        """Upsert by id. New keys are claimed before the write, old ones released after."""
        current = await self.get_by_id(record.id)
        if current is None:
            return await self.create(record)

        email_moved = current.email != record.email
        subject_moved = current.external_subject_id != record.external_subject_id
        if email_moved:
            await claim(self._emails, record.email, record.id, KEY_EMAIL)
        if subject_moved and record.external_subject_id:
            try:
                await claim(self._subjects, record.external_subject_id, record.id, KEY_SUBJECT)
            except Exception:
                if email_moved:
                    await release(self._emails, record.email, record.id)
                raise

        record.updated_at = utc_now()
        await self._coll.document(record.id).set(_to_doc(record))

        if email_moved:
            await release(self._emails, current.email, record.id)
        if subject_moved and current.external_subject_id:
            await release(self._subjects, current.external_subject_id, record.id)
        return record

    async def delete(self, record_id: str) -> bool:
        current = await self.get_by_id(record_id)
        if current is None:
            return False
        await self._coll.document(record_id).delete()
        await release(self._emails, current.email, record_id)
        if current.external_subject_id:
            await release(self._subjects, current.external_subject_id, record_id)
        logger.info("Directory record deleted: id=%s", record_id)
        return True

    async def list_by_role(self, role: Role) -> list[DirectoryRecord]:
        records = [
            _to_entity(snapshot.id, snapshot.to_dict())
            async for snapshot in self._coll.where("role", "==", role.value).stream()
        ]
        records.sort(key=lambda r: r.created_at)
        return records

    async def list_by_course(self, course_id: str) -> list[DirectoryRecord]:
        return [
            _to_entity(snapshot.id, snapshot.to_dict())
            async for snapshot in self._coll.where("course_ids", "array_contains", course_id).stream()
        ]

    async def count_by_role(self, role: Role) -> int:
        count = 0
        async for _ in self._coll.where("role", "==", role.value).stream():
            count += 1
        return count
