"""Uniqueness guard documents.

A guard is a document in an *_index collection whose id is derived from
the unique key and whose data names the owning entity. Claiming a key is
a create-if-absent write, so two writers racing for the same key cannot
both succeed.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any

from portal.domain.exceptions import PersistenceConflictException
from portal.infrastructure.firebase._rest_client import DocumentExistsError

logger = logging.getLogger(__name__)


def guard_id(key: str) -> str:
    """Document id for a key (hashed so any string is a valid Firestore id)."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


async def read_owner(collection: Any, key: str) -> str | None:
    """Return the owner id recorded for key, or None if unclaimed."""
    snapshot = await collection.document(guard_id(key)).get()
    if snapshot is None:
        return None
    return snapshot.to_dict().get("owner_id")


async def claim(collection: Any, key: str, owner_id: str, key_type: str) -> None:
    """Claim key for owner_id.

    Re-claiming a key the owner already holds succeeds.

    Raises:
        PersistenceConflictException: another owner holds the key.
    """
    try:
        await collection.create(guard_id(key), {"owner_id": owner_id, "key_type": key_type})
    except DocumentExistsError:
        holder = await read_owner(collection, key)
        if holder == owner_id:
            return
        logger.info("Uniqueness conflict on %s for owner %s", key_type, owner_id)
        raise PersistenceConflictException(key_type, key) from None


async def release(collection: Any, key: str, owner_id: str) -> None:
    """Release key if owner_id still holds it."""
    if await read_owner(collection, key) == owner_id:
        await collection.document(guard_id(key)).delete()
