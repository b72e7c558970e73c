"""Firestore-backed course repository (implements ICourseRepository)."""

from __future__ import annotations

import asyncio
from typing import Any

from portal.domain.entities.course import Course, normalize_course_name
from portal.infrastructure.firebase.collections import (
    COLLECTION_COURSE_NAME_INDEX,
    COLLECTION_COURSES,
)
from portal.infrastructure.firebase.repositories._guards import claim, read_owner, release
from portal.shared.utils.datetime import ensure_utc, utc_now

KEY_COURSE_NAME = "course_name"


def _to_doc(course: Course) -> dict[str, Any]:
    return {
        "name": course.name,
        "description": course.description,
        "created_at": course.created_at,
        "updated_at": course.updated_at,
    }


def _to_entity(doc_id: str, data: dict[str, Any]) -> Course:
    created_at = ensure_utc(data.get("created_at")) or utc_now()
    return Course(
        id=doc_id,
        name=data.get("name", ""),
        description=data.get("description") or "",
        created_at=created_at,
        updated_at=ensure_utc(data.get("updated_at")) or created_at,
    )


class FirestoreCourseRepository:
    """Courses in COLLECTION_COURSES with a case-insensitive name guard."""

    def __init__(self, client: Any) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_COURSES)
        self._names = client.collection(COLLECTION_COURSE_NAME_INDEX)

    async def get_by_id(self, course_id: str) -> Course | None:
        snapshot = await self._coll.document(course_id).get()
        if not snapshot:
            return None
        return _to_entity(snapshot.id, snapshot.to_dict())

    async def find_by_name(self, name: str) -> Course | None:
        owner_id = await read_owner(self._names, normalize_course_name(name))
        if owner_id is None:
            return None
        return await self.get_by_id(owner_id)

    async def get_many(self, course_ids: list[str]) -> dict[str, Course]:
        unique_ids = list(dict.fromkeys(course_ids))
        found = await asyncio.gather(*(self.get_by_id(cid) for cid in unique_ids))
        return {course.id: course for course in found if course is not None}

    async def list_all(self) -> list[Course]:
        courses = [
            _to_entity(snapshot.id, snapshot.to_dict())
            async for snapshot in self._coll.stream()
        ]
        courses.sort(key=lambda c: c.name_key)
        return courses

    async def create(self, course: Course) -> Course:
        await claim(self._names, course.name_key, course.id, KEY_COURSE_NAME)
        await self._coll.document(course.id).set(_to_doc(course))
        return course

    async def save(self, course: Course, previous_name_key: str | None = None) -> Course:
        renamed = previous_name_key is not None and previous_name_key != course.name_key
        if renamed:
            await claim(self._names, course.name_key, course.id, KEY_COURSE_NAME)
        course.updated_at = utc_now()
        await self._coll.document(course.id).set(_to_doc(course))
        if renamed:
            await release(self._names, previous_name_key, course.id)
        return course

    async def delete(self, course_id: str) -> bool:
        current = await self.get_by_id(course_id)
        if current is None:
            return False
        await self._coll.document(course_id).delete()
        await release(self._names, current.name_key, course_id)
        return True

    async def count(self) -> int:
        count = 0
        async for _ in self._coll.stream():
            count += 1
        return count
