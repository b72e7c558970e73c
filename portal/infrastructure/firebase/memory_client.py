"""In-process document store with the same API as FirestoreRESTClient.

Backs DATABASE_BACKEND=memory (local development and tests). Each call
completes without yielding to the event loop between read and write, so
create-if-absent is atomic within one process just as Firestore's
documentId POST is across processes.
"""

from __future__ import annotations

import copy
from collections.abc import AsyncIterator
from typing import Any

from portal.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    DocumentSnapshot,
)

_Store = dict[str, dict[str, dict[str, Any]]]


def _matches(data: dict[str, Any], field: str, op: str, value: Any) -> bool:
    current = data.get(field)
    if op == "==":
        return current == value
    if op == "!=":
        return current != value
    if op in ("array_contains", "array-contains"):
        return isinstance(current, list) and value in current
    if op == "in":
        return current in value
    raise ValueError(f"Unsupported operator for memory backend: {op!r}")


def _sort_key(value: Any) -> tuple:
    # None sorts first, as in Firestore's type ordering.
    return (value is not None, value)


class MemoryDocumentReference:
    def __init__(self, store: _Store, collection_id: str, document_id: str):
        self._store = store
        self._collection_id = collection_id
        self.id = document_id

    async def set(self, data: dict[str, Any]) -> None:
        self._store.setdefault(self._collection_id, {})[self.id] = copy.deepcopy(data)

    async def get(self) -> DocumentSnapshot | None:
        data = self._store.get(self._collection_id, {}).get(self.id)
        if data is None:
            return None
        return DocumentSnapshot(self.id, copy.deepcopy(data))

    async def delete(self) -> None:
        self._store.get(self._collection_id, {}).pop(self.id, None)


class MemoryQuery:
    """Filter/order/offset/limit over one collection. A limit of 0 means no limit."""

    def __init__(
        self,
        store: _Store,
        collection_id: str,
        where: tuple[str, str, Any] | None = None,
    ):
        self._store = store
        self._collection_id = collection_id
        self._where = where
        self._order_by: tuple[str, bool] | None = None
        self._offset = 0
        self._limit = 0

    def order_by(self, field: str, direction: str = "ASCENDING") -> MemoryQuery:
        self._order_by = (field, direction.upper() == "DESCENDING")
        return self

    def offset(self, n: int) -> MemoryQuery:
        self._offset = n
        return self

    def limit(self, n: int) -> MemoryQuery:
        self._limit = n
        return self

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        rows = list(self._store.get(self._collection_id, {}).items())
        if self._where is not None:
            field, op, value = self._where
            rows = [(k, v) for k, v in rows if _matches(v, field, op, value)]
        if self._order_by is not None:
            field, descending = self._order_by
            rows.sort(key=lambda kv: _sort_key(kv[1].get(field)), reverse=descending)
        rows = rows[self._offset:]
        if self._limit:
            rows = rows[: self._limit]
        for doc_id, data in rows:
            yield DocumentSnapshot(doc_id, copy.deepcopy(data))


class MemoryCollectionReference:
    def __init__(self, store: _Store, collection_id: str):
        self._store = store
        self._collection_id = collection_id

    def document(self, document_id: str) -> MemoryDocumentReference:
        return MemoryDocumentReference(self._store, self._collection_id, document_id)

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        """Create a document; raise DocumentExistsError if the id is taken."""
        docs = self._store.setdefault(self._collection_id, {})
        if document_id in docs:
            raise DocumentExistsError("Document already exists")
        docs[document_id] = copy.deepcopy(data)

    def where(self, field: str, op: str, value: Any) -> MemoryQuery:
        return MemoryQuery(self._store, self._collection_id, (field, op, value))

    def order_by(self, field: str, direction: str = "ASCENDING") -> MemoryQuery:
        return MemoryQuery(self._store, self._collection_id).order_by(field, direction)

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        async for snapshot in MemoryQuery(self._store, self._collection_id).stream():
            yield snapshot


class MemoryDocumentClient:
    """Drop-in replacement for FirestoreRESTClient that keeps documents in a dict."""

    def __init__(self) -> None:
        self._store: _Store = {}

    def collection(self, collection_id: str) -> MemoryCollectionReference:
        return MemoryCollectionReference(self._store, collection_id)

    def reset(self) -> None:
        self._store.clear()

    async def aclose(self) -> None:
        return None
