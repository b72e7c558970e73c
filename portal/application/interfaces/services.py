"""Service interfaces (ports) for the application layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from portal.application.dtos.identity import IdentityProfile


class IIdentityProvider(Protocol):
    """Protocol for the external identity provider (token introspection and user lookup)."""

    async def verify_token(self, credential: str) -> str:
        """Return the verified subject id.

        Raises AuthenticationException(InvalidCredential) when the provider
        rejects the credential, IdentityProviderException when it cannot answer.
        """

    async def get_user(self, subject_id: str) -> IdentityProfile:
        """Return the provider's profile for subject_id.

        Raises IdentityProviderException when unreachable, timed out,
        answering with an error, or when the user has no email on file.
        """

    async def aclose(self) -> None:
        """Release HTTP resources."""
