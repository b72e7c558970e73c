"""Firestore-backed material and previous-year paper repositories."""

from __future__ import annotations

from typing import Any, ClassVar

from portal.domain.entities.resources import Material, PreviousYearPaper
from portal.infrastructure.firebase.collections import (
    COLLECTION_MATERIALS,
    COLLECTION_PAPERS,
)
from portal.shared.utils.datetime import ensure_utc, utc_now


class _FirestoreResourceRepository:
    """Shared implementation; subclasses set the collection and entity type."""

    collection_name: ClassVar[str]

    def __init__(self, client: Any) -> None:
        self._client = client
        self._coll = client.collection(self.collection_name)

    def _to_doc(self, item: Material) -> dict[str, Any]:
        return {
            "faculty_id": item.faculty_id,
            "course_id": item.course_id,
            "name": item.name,
            "description": item.description,
            "file_url": item.file_url,
            "upload_date": item.upload_date,
            "created_at": item.created_at,
            "updated_at": item.updated_at,
        }

    def _entity_kwargs(self, doc_id: str, data: dict[str, Any]) -> dict[str, Any]:
        created_at = ensure_utc(data.get("created_at")) or utc_now()
        return {
            "id": doc_id,
            "faculty_id": data.get("faculty_id", ""),
            "course_id": data.get("course_id", ""),
            "name": data.get("name", ""),
            "description": data.get("description", ""),
            "file_url": data.get("file_url", ""),
            "upload_date": ensure_utc(data.get("upload_date")) or created_at,
            "created_at": created_at,
            "updated_at": ensure_utc(data.get("updated_at")) or created_at,
        }

    def _to_entity(self, doc_id: str, data: dict[str, Any]) -> Material:
        return Material(**self._entity_kwargs(doc_id, data))

    async def get_by_id(self, item_id: str) -> Material | None:
        snapshot = await self._coll.document(item_id).get()
        if not snapshot:
            return None
        return self._to_entity(snapshot.id, snapshot.to_dict())

    async def list_all(self) -> list[Material]:
        items = [
            self._to_entity(snapshot.id, snapshot.to_dict())
            async for snapshot in self._coll.order_by("upload_date", "DESCENDING").stream()
        ]
        return items

    async def list_by_faculty(self, faculty_id: str) -> list[Material]:
        items = [
            self._to_entity(snapshot.id, snapshot.to_dict())
            async for snapshot in self._coll.where("faculty_id", "==", faculty_id).stream()
        ]
        # Sorted here; filter plus order on different fields needs a composite index.
        items.sort(key=lambda i: i.upload_date, reverse=True)
        return items

    async def list_recent(self, limit: int, faculty_id: str | None = None) -> list[Material]:
        if faculty_id is not None:
            return (await self.list_by_faculty(faculty_id))[:limit]
        query = self._coll.order_by("upload_date", "DESCENDING").limit(limit)
        return [self._to_entity(snapshot.id, snapshot.to_dict()) async for snapshot in query.stream()]

    async def create(self, item: Material) -> Material:
        await self._coll.document(item.id).set(self._to_doc(item))
        return item

    async def save(self, item: Material) -> Material:
        item.updated_at = utc_now()
        await self._coll.document(item.id).set(self._to_doc(item))
        return item

    async def delete(self, item_id: str) -> bool:
        if await self._coll.document(item_id).get() is None:
            return False
        await self._coll.document(item_id).delete()
        return True

    async def count(self, faculty_id: str | None = None) -> int:
        stream = (
            self._coll.where("faculty_id", "==", faculty_id).stream()
            if faculty_id is not None
            else self._coll.stream()
        )
        count = 0
        async for _ in stream:
            count += 1
        return count


class FirestoreMaterialRepository(_FirestoreResourceRepository):
    """Course materials (implements IResourceRepository)."""

    collection_name = COLLECTION_MATERIALS


class FirestorePaperRepository(_FirestoreResourceRepository):
    """Previous-year papers (implements IResourceRepository)."""

    collection_name = COLLECTION_PAPERS

    def _to_doc(self, item: Material) -> dict[str, Any]:
        doc = super()._to_doc(item)
        doc["year"] = getattr(item, "year", 0)
        return doc

    def _to_entity(self, doc_id: str, data: dict[str, Any]) -> PreviousYearPaper:
        return PreviousYearPaper(**self._entity_kwargs(doc_id, data), year=int(data.get("year") or 0))
