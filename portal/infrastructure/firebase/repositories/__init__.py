"""Firestore repository implementations (also used with the in-memory client)."""

from portal.infrastructure.firebase.repositories.course_repo_firestore import (
    FirestoreCourseRepository,
)
from portal.infrastructure.firebase.repositories.directory_repo_firestore import (
    FirestoreDirectoryRepository,
)
from portal.infrastructure.firebase.repositories.resource_repo_firestore import (
    FirestoreMaterialRepository,
    FirestorePaperRepository,
)

__all__ = [
    "FirestoreCourseRepository",
    "FirestoreDirectoryRepository",
    "FirestoreMaterialRepository",
    "FirestorePaperRepository",
]
