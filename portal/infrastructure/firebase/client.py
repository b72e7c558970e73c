"""Document database client (Firestore REST or in-memory).

Initialized at app startup. The firestore backend uses either
FIREBASE_SERVICE_ACCOUNT_KEY (JSON string) or FIREBASE_SERVICE_ACCOUNT_PATH
(file path) and talks to the Firestore REST API with google-auth. The
memory backend keeps documents in-process and exposes the same API.
"""

import json
import logging
from pathlib import Path

from portal.core.config import Settings, get_settings
from portal.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    _get_credentials,
)
from portal.infrastructure.firebase.memory_client import MemoryDocumentClient

logger = logging.getLogger(__name__)

DocumentClient = FirestoreRESTClient | MemoryDocumentClient

_document_client: DocumentClient | None = None


def _load_key_dict(settings: Settings) -> dict | None:
    """Return service account dict from env key or file path."""
    key_json = (
        settings.firebase_service_account_key.get_secret_value()
        if settings.firebase_service_account_key
        else None
    )
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            logger.warning(
                "FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: %s (resolved: %s)",
                path,
                resolved,
            )
            return None
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    return None


def init_database(settings: Settings | None = None) -> bool:
    """Initialize the document client for the configured backend.

    Idempotent if already initialized. For firestore, invalid credentials
    are logged and False is returned.

    Returns:
        True if a client is available after the call.
    """
    global _document_client
    if _document_client is not None:
        return True
    settings = settings or get_settings()
    if settings.database_backend == "memory":
        _document_client = MemoryDocumentClient()
        logger.info("Using in-memory document store")
        return True
    try:
        key_dict = _load_key_dict(settings)
        if not key_dict:
            return False
        project_id = key_dict.get("project_id")
        if not project_id:
            logger.error("Firebase service account JSON missing 'project_id'")
            return False
        _document_client = FirestoreRESTClient(project_id, _get_credentials(key_dict))
        logger.info("Firestore client initialized for project %s", project_id)
        return True
    except Exception:
        logger.exception("Firestore initialization failed")
        return False


def get_document_client() -> DocumentClient | None:
    """Return the document client, or None if not initialized.

    Supported operations (all async):
    - await db.collection(name).create(id, data)  # DocumentExistsError if taken
    - await db.collection(name).document(id).set(data) / .get() / .delete()
    - async for doc in db.collection(name).where(field, op, value).stream()
    """
    return _document_client


def set_document_client(client: DocumentClient | None) -> None:
    """Replace the process document client (tests inject a fresh memory store)."""
    global _document_client
    _document_client = client


async def close_database() -> None:
    """Close the client's HTTP connection pool. Call from app shutdown."""
    global _document_client
    if _document_client is not None:
        await _document_client.aclose()
        _document_client = None
        logger.info("Document client closed")
