"""DTOs for identity-provider data (no dependency on provider SDKs)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class IdentityProfile:
    """Verified user profile as reported by the identity provider."""

    email: str
    first_name: str | None = None
    last_name: str | None = None
    image_url: str | None = None

    @property
    def display_name(self) -> str | None:
        parts = [p.strip() for p in (self.first_name, self.last_name) if p and p.strip()]
        return " ".join(parts) or None
