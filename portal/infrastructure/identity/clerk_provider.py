"""Clerk identity provider adapter (implements IIdentityProvider).

Session tokens are RS256 JWTs. They are verified locally with python-jose
against either the configured PEM key (CLERK_JWT_KEY) or the instance
JWKS fetched from the Backend API and cached. User profiles come from
GET /users/{id} on the Backend API.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx
from jose import jwt
from jose.exceptions import JOSEError

from portal.application.dtos.identity import IdentityProfile
from portal.domain.enums import AuthFailureReason
from portal.domain.exceptions import AuthenticationException, IdentityProviderException

logger = logging.getLogger(__name__)

ALGORITHMS = ["RS256"]
JWKS_TTL_SECONDS = 300
JWKS_MIN_REFRESH_SECONDS = 30
CLOCK_SKEW_SECONDS = 5


def _invalid() -> AuthenticationException:
    return AuthenticationException(AuthFailureReason.INVALID_CREDENTIAL)


@dataclass
class _JWKSEntry:
    keys: list[dict[str, Any]]
    fetched_at: float
    expires_at: float


class ClerkIdentityProvider:
    """Verifies Clerk session tokens and reads users from the Clerk Backend API."""

    def __init__(
        self,
        secret_key: str,
        *,
        api_url: str = "https://api.clerk.com/v1",
        jwt_key: str | None = None,
        authorized_parties: list[str] | None = None,
        timeout_seconds: float = 5.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._api_url = api_url.rstrip("/")
        self._jwt_key = jwt_key
        self._authorized_parties = set(authorized_parties or [])
        self._http = http_client if http_client is not None else httpx.AsyncClient(
            timeout=timeout_seconds
        )
        self._owns_http = http_client is None
        self._timeout = timeout_seconds
        self._jwks: _JWKSEntry | None = None
        self._jwks_lock = asyncio.Lock()

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it."""
        if self._owns_http:
            await self._http.aclose()

    async def _api_get(self, path: str) -> Any:
        """GET from the Backend API; any transport or status failure is a provider error."""
        try:
            resp = await self._http.get(
                f"{self._api_url}{path}",
                headers={"Authorization": f"Bearer {self._secret_key}"},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            return resp.json()
        except httpx.TimeoutException as e:
            logger.warning("Identity provider timed out on %s", path)
            raise IdentityProviderException() from e
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Identity provider answered %s on %s", e.response.status_code, path
            )
            raise IdentityProviderException() from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Identity provider request failed on %s: %s", path, e)
            raise IdentityProviderException() from e

    async def _get_jwks(self, force_refresh: bool = False) -> list[dict[str, Any]]:
        async with self._jwks_lock:
            now = time.monotonic()
            if self._jwks and self._jwks.expires_at > now:
                if not force_refresh:
                    return self._jwks.keys
                # Unknown kids refetch at most once per JWKS_MIN_REFRESH_SECONDS.
                if now - self._jwks.fetched_at < JWKS_MIN_REFRESH_SECONDS:
                    return self._jwks.keys
            body = await self._api_get("/jwks")
            keys = body.get("keys") if isinstance(body, dict) else None
            if not isinstance(keys, list):
                logger.warning("Identity provider returned malformed JWKS")
                raise IdentityProviderException()
            self._jwks = _JWKSEntry(
                keys=keys, fetched_at=now, expires_at=now + JWKS_TTL_SECONDS
            )
            return keys

    async def _signing_key(self, token: str) -> Any:
        if self._jwt_key:
            return self._jwt_key
        try:
            kid = jwt.get_unverified_header(token).get("kid")
        except JOSEError as e:
            raise _invalid() from e
        if not kid:
            raise _invalid()
        for force_refresh in (False, True):
            for key in await self._get_jwks(force_refresh=force_refresh):
                if isinstance(key, dict) and key.get("kid") == kid:
                    return key
        raise _invalid()

    async def verify_token(self, credential: str) -> str:
        """Verify signature, expiry and authorized party; return the subject id."""
        if not credential:
            raise _invalid()
        key = await self._signing_key(credential)
        try:
            claims = jwt.decode(
                credential,
                key,
                algorithms=ALGORITHMS,
                options={"verify_aud": False, "leeway": CLOCK_SKEW_SECONDS},
            )
        except JOSEError as e:
            logger.info("Session token rejected: %s", type(e).__name__)
            raise _invalid() from e

        subject_id = claims.get("sub")
        if not isinstance(subject_id, str) or not subject_id:
            raise _invalid()
        azp = claims.get("azp")
        if self._authorized_parties and azp and azp not in self._authorized_parties:
            logger.info("Session token from unauthorized party: %s", azp)
            raise _invalid()
        return subject_id

    async def get_user(self, subject_id: str) -> IdentityProfile:
        """Return the user's primary email (or first on file) and profile fields."""
        body = await self._api_get(f"/users/{subject_id}")
        if not isinstance(body, dict):
            raise IdentityProviderException()
        addresses = [a for a in body.get("email_addresses") or [] if isinstance(a, dict)]
        primary_id = body.get("primary_email_address_id")
        chosen = next((a for a in addresses if a.get("id") == primary_id), None)
        if chosen is None and addresses:
            chosen = addresses[0]
        email = (chosen or {}).get("email_address")
        if not email:
            logger.warning("Identity provider user %s has no email on file", subject_id)
            raise IdentityProviderException("No email address on file")
        return IdentityProfile(
            email=email,
            first_name=body.get("first_name"),
            last_name=body.get("last_name"),
            image_url=body.get("image_url"),
        )
