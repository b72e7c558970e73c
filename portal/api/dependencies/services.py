"""Application service dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from portal.application.interfaces.repositories import (
    ICourseRepository,
    IDirectoryRepository,
    IResourceRepository,
)
from portal.application.interfaces.services import IIdentityProvider
from portal.application.services import (
    MATERIAL_KIND,
    PAPER_KIND,
    AuthorizationService,
    CourseService,
    DashboardService,
    DirectoryService,
    ResourceService,
    SignInService,
    UploadService,
)
from portal.core.config import get_settings
from portal.domain.role_resolver import RoleResolver, RoleRules
from portal.infrastructure.external.storage import StorageFactory, StorageProtocol
from portal.infrastructure.identity import IdentityProviderFactory

from .db import get_course_repo, get_directory_repo, get_material_repo, get_paper_repo


def get_identity_provider(request: Request) -> IIdentityProvider:
    """Identity provider created in the lifespan (built lazily if absent)."""
    provider = getattr(request.app.state, "identity_provider", None)
    if provider is None:
        provider = IdentityProviderFactory.create_identity_provider(
            http_client=getattr(request.app.state, "http_client", None)
        )
        request.app.state.identity_provider = provider
    return provider


def get_storage(request: Request) -> StorageProtocol:
    """Storage backend created in the lifespan (built lazily if absent)."""
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        storage = StorageFactory.create_storage_service()
        request.app.state.storage = storage
    return storage


def get_role_resolver() -> RoleResolver:
    settings = get_settings()
    return RoleResolver(
        RoleRules.from_values(
            settings.institution_domain, settings.faculty_department_codes_list
        )
    )


def get_authorization_service() -> AuthorizationService:
    return AuthorizationService()


def get_sign_in_service(
    provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
    directory_repo: Annotated[IDirectoryRepository, Depends(get_directory_repo)],
    role_resolver: Annotated[RoleResolver, Depends(get_role_resolver)],
) -> SignInService:
    settings = get_settings()
    return SignInService(
        provider,
        directory_repo,
        role_resolver,
        allow_self_registration=settings.allow_self_registration,
        conflict_retries=settings.sign_in_conflict_retries,
    )


def get_course_service(
    course_repo: Annotated[ICourseRepository, Depends(get_course_repo)],
    directory_repo: Annotated[IDirectoryRepository, Depends(get_directory_repo)],
) -> CourseService:
    return CourseService(course_repo, directory_repo)


def get_directory_service(
    directory_repo: Annotated[IDirectoryRepository, Depends(get_directory_repo)],
    course_repo: Annotated[ICourseRepository, Depends(get_course_repo)],
    role_resolver: Annotated[RoleResolver, Depends(get_role_resolver)],
) -> DirectoryService:
    return DirectoryService(directory_repo, course_repo, role_resolver)


def get_material_service(
    material_repo: Annotated[IResourceRepository, Depends(get_material_repo)],
    directory_repo: Annotated[IDirectoryRepository, Depends(get_directory_repo)],
    course_repo: Annotated[ICourseRepository, Depends(get_course_repo)],
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> ResourceService:
    return ResourceService(MATERIAL_KIND, material_repo, directory_repo, course_repo, authorization)


def get_paper_service(
    paper_repo: Annotated[IResourceRepository, Depends(get_paper_repo)],
    directory_repo: Annotated[IDirectoryRepository, Depends(get_directory_repo)],
    course_repo: Annotated[ICourseRepository, Depends(get_course_repo)],
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> ResourceService:
    return ResourceService(PAPER_KIND, paper_repo, directory_repo, course_repo, authorization)


def get_dashboard_service(
    directory_repo: Annotated[IDirectoryRepository, Depends(get_directory_repo)],
    course_repo: Annotated[ICourseRepository, Depends(get_course_repo)],
    material_repo: Annotated[IResourceRepository, Depends(get_material_repo)],
    paper_repo: Annotated[IResourceRepository, Depends(get_paper_repo)],
    directory_service: Annotated[DirectoryService, Depends(get_directory_service)],
    material_service: Annotated[ResourceService, Depends(get_material_service)],
    paper_service: Annotated[ResourceService, Depends(get_paper_service)],
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> DashboardService:
    return DashboardService(
        directory_repo,
        course_repo,
        material_repo,
        paper_repo,
        directory_service,
        material_service,
        paper_service,
        authorization,
    )


def get_upload_service(
    storage: Annotated[StorageProtocol, Depends(get_storage)],
) -> UploadService:
    settings = get_settings()
    return UploadService(storage, settings.upload_folder, settings.max_upload_size)
