"""Application services (use-case orchestration)."""

from portal.application.services.authorization_service import (
    AuthorizationService,
    Decision,
)
from portal.application.services.course_service import CourseService
from portal.application.services.dashboard_service import DashboardService
from portal.application.services.directory_service import DirectoryService
from portal.application.services.resource_service import (
    MATERIAL_KIND,
    PAPER_KIND,
    ResourceService,
)
from portal.application.services.sign_in_service import SignInService
from portal.application.services.upload_service import UploadService

__all__ = [
    "AuthorizationService",
    "CourseService",
    "DashboardService",
    "Decision",
    "DirectoryService",
    "MATERIAL_KIND",
    "PAPER_KIND",
    "ResourceService",
    "SignInService",
    "UploadService",
]
