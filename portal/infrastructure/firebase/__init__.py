"""Document database integration (Firestore REST and in-memory backends)."""

from portal.infrastructure.firebase.client import (
    close_database,
    get_document_client,
    init_database,
)

__all__ = [
    "close_database",
    "get_document_client",
    "init_database",
]
