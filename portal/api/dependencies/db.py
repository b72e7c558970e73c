"""Document client and repository dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException

from portal.application.interfaces.repositories import (
    ICourseRepository,
    IDirectoryRepository,
    IResourceRepository,
)
from portal.infrastructure.firebase import get_document_client
from portal.infrastructure.firebase.client import DocumentClient
from portal.infrastructure.firebase.repositories import (
    FirestoreCourseRepository,
    FirestoreDirectoryRepository,
    FirestoreMaterialRepository,
    FirestorePaperRepository,
)


def get_db() -> DocumentClient:
    """Process document client; 503 when the store was not initialized."""
    client = get_document_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Database not available")
    return client


def get_directory_repo(
    db: Annotated[DocumentClient, Depends(get_db)],
) -> IDirectoryRepository:
    return FirestoreDirectoryRepository(db)


def get_course_repo(
    db: Annotated[DocumentClient, Depends(get_db)],
) -> ICourseRepository:
    return FirestoreCourseRepository(db)


def get_material_repo(
    db: Annotated[DocumentClient, Depends(get_db)],
) -> IResourceRepository:
    return FirestoreMaterialRepository(db)


def get_paper_repo(
    db: Annotated[DocumentClient, Depends(get_db)],
) -> IResourceRepository:
    return FirestorePaperRepository(db)
