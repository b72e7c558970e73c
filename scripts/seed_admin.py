"""Provision an admin directory record (Firestore backend).

Usage:
    python -m scripts.seed_admin <email> [display name]
Admins are never derived from an email address, so the first admin has to
be created here. The record links to its identity on first sign-in.
"""

import asyncio
import sys

from portal.core.config import get_settings
from portal.domain.entities.directory import DirectoryRecord
from portal.domain.enums import Role
from portal.domain.exceptions import PortalException
from portal.domain.role_resolver import normalize_email
from portal.infrastructure.firebase import close_database, get_document_client, init_database
from portal.infrastructure.firebase.repositories import FirestoreDirectoryRepository
from portal.shared.utils import generate_cuid, utc_now


async def main() -> None:
    """Create the admin record unless the email is already on file."""
    if len(sys.argv) < 2:
        print("Usage: python -m scripts.seed_admin <email> [display name]", file=sys.stderr)
        sys.exit(1)
    email = normalize_email(sys.argv[1])
    display_name = " ".join(sys.argv[2:]).strip() or None

    settings = get_settings()
    if settings.database_backend == "memory":
        print("DATABASE_BACKEND is memory; nothing would persist", file=sys.stderr)
        sys.exit(1)
    if not init_database(settings):
        print("Document database is not configured", file=sys.stderr)
        sys.exit(1)

    try:
        repo = FirestoreDirectoryRepository(get_document_client())
        existing = await repo.find_by_email(email)
        if existing is not None:
            print(f"Already on file: {existing.id} ({existing.email}, {existing.role.value})")
            return
        now = utc_now()
        record = DirectoryRecord(
            id=generate_cuid(),
            email=email,
            role=Role.ADMIN,
            join_date=now,
            created_at=now,
            updated_at=now,
            display_name=display_name,
        )
        await repo.create(record)
        print(f"Created admin: {record.id} ({record.email})")
    except PortalException as e:
        print(f"Failed: {e.message}", file=sys.stderr)
        sys.exit(1)
    finally:
        await close_database()


if __name__ == "__main__":
    asyncio.run(main())
