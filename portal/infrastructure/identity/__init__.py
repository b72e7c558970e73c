"""Identity provider adapters."""

from portal.infrastructure.identity.factory import IdentityProviderFactory

__all__ = ["IdentityProviderFactory"]
