"""Admin dashboard endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from portal.api.dependencies import get_dashboard_service, require_action
from portal.application.services import DashboardService
from portal.domain.entities.directory import DirectoryRecord
from portal.domain.enums import Action
from portal.schemas.dashboard import AdminDashboardResponse

router = APIRouter()


@router.get("/dashboard", response_model=AdminDashboardResponse)
async def admin_dashboard(
    _: Annotated[DirectoryRecord, Depends(require_action(Action.ADMIN_VIEW_DASHBOARD))],
    svc: Annotated[DashboardService, Depends(get_dashboard_service)],
):
    """Counts, recent activity and per-course faculty distribution."""
    return AdminDashboardResponse.from_dashboard(await svc.admin_dashboard())
