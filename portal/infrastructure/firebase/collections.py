"""Firestore collection names (schema-in-code).

Firestore has no DDL or migrations. Collections are created on first
write. The *_index collections hold one guard document per unique key
(document id = the key, data = owner id); creating a guard with an id
that is taken fails, which enforces uniqueness.

Example:
    from portal.infrastructure.firebase.client import get_document_client
    from portal.infrastructure.firebase.collections import COLLECTION_COURSES

    db = get_document_client()
    if db:
        await db.collection(COLLECTION_COURSES).document(course_id).set({...})
"""

COLLECTION_USERS = "users"
COLLECTION_COURSES = "courses"
COLLECTION_MATERIALS = "materials"
COLLECTION_PAPERS = "previous_year_papers"

# Uniqueness guards
COLLECTION_USER_EMAIL_INDEX = "user_email_index"
COLLECTION_USER_SUBJECT_INDEX = "user_subject_index"
COLLECTION_COURSE_NAME_INDEX = "course_name_index"
