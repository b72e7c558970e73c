"""Sign-in workflow: link a verified identity to its directory record.

Given a subject id already verified by the session authenticator:
fetch the email from the identity provider, gate it on the institution
domain, then match the directory by email. Pre-provisioned records are
authoritative for role; unset profile fields are backfilled once. A new
record is created only for students and only when self-registration is
enabled. Uniqueness conflicts from concurrent first sign-ins are retried
as read-then-backfill.
"""

from __future__ import annotations

import logging

from portal.application.dtos.directory import SignInResult
from portal.application.dtos.identity import IdentityProfile
from portal.application.interfaces.repositories import IDirectoryRepository
from portal.application.interfaces.services import IIdentityProvider
from portal.domain.entities.directory import DirectoryRecord
from portal.domain.enums import Role
from portal.domain.exceptions import (
    DomainNotAllowedException,
    IdentityConflictException,
    NotPreRegisteredException,
    PersistenceConflictException,
)
from portal.domain.role_resolver import RoleResolver, normalize_email
from portal.shared.telemetry.tracing import add_span_attributes, traced
from portal.shared.utils import generate_cuid, utc_now

logger = logging.getLogger(__name__)


class SignInService:
    """Orchestrates sign-in against the identity directory."""

    def __init__(
        self,
        identity_provider: IIdentityProvider,
        directory_repo: IDirectoryRepository,
        role_resolver: RoleResolver,
        *,
        allow_self_registration: bool = False,
        conflict_retries: int = 2,
    ) -> None:
        self._identity_provider = identity_provider
        self._directory_repo = directory_repo
        self._role_resolver = role_resolver
        self._allow_self_registration = allow_self_registration
        self._conflict_retries = max(0, conflict_retries)

    @traced("sign_in")
    async def sign_in(self, subject_id: str) -> SignInResult:
        """Run the workflow for a verified subject id.

        Raises:
            IdentityProviderException: provider unreachable or no email on file.
            DomainNotAllowedException: email outside the institution.
            NotPreRegisteredException: no record and self-registration not permitted.
            IdentityConflictException: record already linked to another subject.
            PersistenceConflictException: uniqueness conflict survived all retries.
        """
        profile = await self._identity_provider.get_user(subject_id)
        email = normalize_email(profile.email)
        resolved_role = self._role_resolver.resolve(email)
        if resolved_role is None:
            logger.info("Sign-in rejected: domain not allowed (subject=%s)", subject_id)
            raise DomainNotAllowedException()

        attempt = 0
        while True:
            attempt += 1
            try:
                result = await self._reconcile(subject_id, email, resolved_role, profile)
                break
            except PersistenceConflictException:
                if attempt > self._conflict_retries:
                    logger.warning(
                        "Sign-in conflict persisted after %d attempts (subject=%s)",
                        attempt,
                        subject_id,
                    )
                    raise
                logger.info(
                    "Sign-in lost a uniqueness race, retrying (subject=%s, attempt=%d)",
                    subject_id,
                    attempt,
                )
        add_span_attributes(
            role=result.record.role.value,
            created=result.created,
            backfilled=result.backfilled,
        )
        return result

    async def _reconcile(
        self,
        subject_id: str,
        email: str,
        resolved_role: Role,
        profile: IdentityProfile,
    ) -> SignInResult:
        record = await self._directory_repo.find_by_email(email)
        if record is None:
            return await self._self_register(subject_id, email, resolved_role, profile)

        if record.is_linked and record.external_subject_id != subject_id:
            logger.warning(
                "Sign-in refused: record %s is linked to another subject", record.id
            )
            raise IdentityConflictException()
        if not record.is_linked:
            await self._ensure_subject_unlinked(subject_id, record.id)

        changed = record.backfill_profile(subject_id, profile.display_name, profile.image_url)
        if changed:
            record = await self._directory_repo.save(record)
            logger.info("Backfilled profile for record %s", record.id)
        return SignInResult(record=record, backfilled=changed)

    async def _ensure_subject_unlinked(
        self, subject_id: str, record_id: str | None = None
    ) -> None:
        """Raise IdentityConflictException when another record already holds subject_id."""
        holder = await self._directory_repo.find_by_subject_id(subject_id)
        if holder is not None and holder.id != record_id:
            logger.warning(
                "Sign-in refused: subject %s is already linked to record %s",
                subject_id,
                holder.id,
            )
            raise IdentityConflictException()

    async def _self_register(
        self,
        subject_id: str,
        email: str,
        resolved_role: Role,
        profile: IdentityProfile,
    ) -> SignInResult:
        if not self._allow_self_registration or resolved_role != Role.STUDENT:
            logger.info(
                "Sign-in rejected: not pre-registered (subject=%s, resolved=%s)",
                subject_id,
                resolved_role.value,
            )
            raise NotPreRegisteredException()
        await self._ensure_subject_unlinked(subject_id)
        now = utc_now()
        record = DirectoryRecord(
            id=generate_cuid(),
            email=email,
            role=Role.STUDENT,
            join_date=now,
            created_at=now,
            updated_at=now,
            external_subject_id=subject_id,
            display_name=profile.display_name,
            avatar_url=profile.image_url,
        )
        record = await self._directory_repo.create(record)
        logger.info("Self-registered student record %s", record.id)
        return SignInResult(record=record, created=True)
