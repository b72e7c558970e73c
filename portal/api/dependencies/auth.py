"""Authentication and authorization dependencies.

get_subject_id verifies the bearer credential with the identity provider.
get_current_record maps the verified subject to its directory record.
require_action(action) additionally runs the role gate for that action;
ownership is checked later by the service once the target is loaded.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Body, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portal.application.interfaces.repositories import IDirectoryRepository
from portal.application.interfaces.services import IIdentityProvider
from portal.application.services import AuthorizationService
from portal.core.config import get_settings
from portal.domain.entities.directory import DirectoryRecord
from portal.domain.enums import Action, AuthFailureReason
from portal.domain.exceptions import (
    AuthenticationException,
    NotPreRegisteredException,
    ValidationException,
)
from portal.schemas.auth import SignInRequest
from portal.shared.context import set_current_record, set_current_subject

from .db import get_directory_repo
from .services import get_authorization_service, get_identity_provider

_http_bearer = HTTPBearer(auto_error=False)


async def _verify(request: Request, provider: IIdentityProvider, credential: str) -> str:
    subject_id = await provider.verify_token(credential)
    request.state.subject_id = subject_id
    set_current_subject(subject_id)
    return subject_id


async def get_subject_id(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
) -> str:
    """Verified subject id from the Authorization bearer credential.

    Raises:
        AuthenticationException: no credential (NoCredential) or rejected (InvalidCredential).
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationException(AuthFailureReason.NO_CREDENTIAL)
    return await _verify(request, provider, credentials.credentials)


async def get_sign_in_subject_id(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
    body: Annotated[SignInRequest | None, Body()] = None,
) -> str:
    """Verified subject id for sign-in, read from the header or the body {token}."""
    if get_settings().sign_in_token_source == "body":
        token = (body.token if body else None) or ""
        if not token.strip():
            raise ValidationException("Token is required", field="token")
        return await _verify(request, provider, token.strip())
    if credentials is None or not credentials.credentials:
        raise AuthenticationException(AuthFailureReason.NO_CREDENTIAL)
    return await _verify(request, provider, credentials.credentials)


async def get_current_record(
    subject_id: Annotated[str, Depends(get_subject_id)],
    directory_repo: Annotated[IDirectoryRepository, Depends(get_directory_repo)],
) -> DirectoryRecord:
    """Directory record linked to the verified subject (403 when there is none)."""
    record = await directory_repo.find_by_subject_id(subject_id)
    if record is None:
        raise NotPreRegisteredException()
    set_current_record(record.id)
    return record


def require_action(action: Action):
    """Dependency factory: signed-in record whose role may perform action."""

    async def _require(
        record: Annotated[DirectoryRecord, Depends(get_current_record)],
        authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> DirectoryRecord:
        authorization.require(record, action)
        return record

    return _require
