"""Faculty administration, profile and dashboard endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from portal.api.dependencies import (
    get_current_record,
    get_dashboard_service,
    get_directory_service,
    require_action,
)
from portal.application.dtos.directory import FacultyCreate, FacultyUpdate
from portal.application.services import DashboardService, DirectoryService
from portal.domain.entities.directory import DirectoryRecord
from portal.domain.enums import Action
from portal.schemas.dashboard import FacultyDashboardResponse
from portal.schemas.directory import (
    FacultyCreateRequest,
    FacultyProfileResponse,
    FacultyResponse,
    FacultyUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=list[FacultyResponse])
async def list_faculty(
    _: Annotated[DirectoryRecord, Depends(require_action(Action.FACULTY_LIST))],
    svc: Annotated[DirectoryService, Depends(get_directory_service)],
):
    """Faculty with experience and course names."""
    return [FacultyResponse.from_summary(s) for s in await svc.list_faculty()]


@router.post("", response_model=FacultyResponse, status_code=201)
async def create_faculty(
    body: FacultyCreateRequest,
    _: Annotated[DirectoryRecord, Depends(require_action(Action.FACULTY_CREATE))],
    svc: Annotated[DirectoryService, Depends(get_directory_service)],
):
    summary = await svc.create_faculty(
        FacultyCreate(
            email=body.email,
            course_ids=body.course_ids,
            join_date=body.join_date,
            name=body.name,
        )
    )
    return FacultyResponse.from_summary(summary)


@router.get("/profile/{subject_id}", response_model=FacultyProfileResponse)
async def faculty_profile(
    subject_id: str,
    actor: Annotated[DirectoryRecord, Depends(get_current_record)],
    svc: Annotated[DashboardService, Depends(get_dashboard_service)],
):
    """Profile of the faculty member signed in as subject_id (self or admin)."""
    return FacultyProfileResponse.from_profile(await svc.faculty_profile(actor, subject_id))


@router.get("/dashboard/{subject_id}", response_model=FacultyDashboardResponse)
async def faculty_dashboard(
    subject_id: str,
    actor: Annotated[DirectoryRecord, Depends(get_current_record)],
    svc: Annotated[DashboardService, Depends(get_dashboard_service)],
):
    return FacultyDashboardResponse.from_dashboard(
        await svc.faculty_dashboard(actor, subject_id)
    )


@router.put("/{faculty_id}", response_model=FacultyResponse)
async def update_faculty(
    faculty_id: str,
    body: FacultyUpdateRequest,
    _: Annotated[DirectoryRecord, Depends(require_action(Action.FACULTY_UPDATE))],
    svc: Annotated[DirectoryService, Depends(get_directory_service)],
):
    """Replace courses (1-4) and/or join date."""
    summary = await svc.update_faculty(
        faculty_id, FacultyUpdate(course_ids=body.course_ids, join_date=body.join_date)
    )
    return FacultyResponse.from_summary(summary)


@router.delete("/{faculty_id}", status_code=204)
async def delete_faculty(
    faculty_id: str,
    _: Annotated[DirectoryRecord, Depends(require_action(Action.FACULTY_DELETE))],
    svc: Annotated[DirectoryService, Depends(get_directory_service)],
):
    await svc.delete_faculty(faculty_id)
