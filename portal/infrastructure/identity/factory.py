"""Identity provider factory: creates the configured provider from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from portal.application.interfaces.services import IIdentityProvider
from portal.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from portal.core.config import Settings

logger = get_logger(__name__)


class IdentityProviderFactory:
    """Factory for identity provider instances based on configuration."""

    @staticmethod
    def create_identity_provider(
        settings: Settings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> IIdentityProvider:
        """Create the identity provider from settings.

        Args:
            settings: Application settings; if None, uses get_settings().
            http_client: Optional shared httpx.AsyncClient for connection reuse.

        Raises:
            ValueError: Unknown provider.
        """
        from portal.core.config import get_settings

        s = settings or get_settings()
        provider = s.identity_provider.lower()
        if provider == "clerk":
            from portal.infrastructure.identity.clerk_provider import ClerkIdentityProvider

            logger.debug("Creating ClerkIdentityProvider (api=%s)", s.clerk_api_url)
            return ClerkIdentityProvider(
                s.clerk_secret_key.get_secret_value(),
                api_url=s.clerk_api_url,
                jwt_key=s.clerk_jwt_key,
                authorized_parties=s.clerk_authorized_parties_list,
                timeout_seconds=s.identity_provider_timeout_seconds,
                http_client=http_client,
            )
        raise ValueError(f"Unknown identity provider: {provider}. Supported: 'clerk'")
