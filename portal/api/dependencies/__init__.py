"""FastAPI dependencies (composition root): repositories, services, auth."""

from .auth import (
    get_current_record,
    get_sign_in_subject_id,
    get_subject_id,
    require_action,
)
from .db import (
    get_course_repo,
    get_db,
    get_directory_repo,
    get_material_repo,
    get_paper_repo,
)
from .services import (
    get_authorization_service,
    get_course_service,
    get_dashboard_service,
    get_directory_service,
    get_identity_provider,
    get_material_service,
    get_paper_service,
    get_role_resolver,
    get_sign_in_service,
    get_storage,
    get_upload_service,
)

__all__ = [
    "get_authorization_service",
    "get_course_repo",
    "get_course_service",
    "get_current_record",
    "get_dashboard_service",
    "get_db",
    "get_directory_repo",
    "get_directory_service",
    "get_identity_provider",
    "get_material_repo",
    "get_material_service",
    "get_paper_repo",
    "get_paper_service",
    "get_role_resolver",
    "get_sign_in_service",
    "get_sign_in_subject_id",
    "get_storage",
    "get_subject_id",
    "get_upload_service",
    "require_action",
]
