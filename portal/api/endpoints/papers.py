"""Previous-year paper endpoints (mounted under /faculty/papers)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from portal.api.dependencies import get_current_record, get_paper_service, require_action
from portal.application.dtos.resources import ResourceCreate, ResourceUpdate
from portal.application.services import ResourceService
from portal.domain.entities.directory import DirectoryRecord
from portal.domain.enums import Action
from portal.schemas.resources import PaperCreateRequest, PaperResponse, PaperUpdateRequest

router = APIRouter()


@router.get("", response_model=list[PaperResponse])
async def list_papers(
    _: Annotated[DirectoryRecord, Depends(require_action(Action.PAPER_LIST))],
    svc: Annotated[ResourceService, Depends(get_paper_service)],
):
    return [PaperResponse.from_view(v) for v in await svc.list_all()]


@router.post("", response_model=PaperResponse, status_code=201)
async def create_paper(
    body: PaperCreateRequest,
    actor: Annotated[DirectoryRecord, Depends(get_current_record)],
    svc: Annotated[ResourceService, Depends(get_paper_service)],
):
    """Publish a paper owned by the signed-in faculty member (year required)."""
    view = await svc.create(
        actor,
        ResourceCreate(
            course_id=body.course_id,
            name=body.name.strip(),
            description=body.description.strip(),
            file_url=body.file_url,
            year=body.year,
        ),
    )
    return PaperResponse.from_view(view)


@router.get("/{faculty_id}", response_model=list[PaperResponse])
async def list_faculty_papers(
    faculty_id: str,
    _: Annotated[DirectoryRecord, Depends(require_action(Action.PAPER_LIST))],
    svc: Annotated[ResourceService, Depends(get_paper_service)],
):
    return [PaperResponse.from_view(v) for v in await svc.list_by_faculty(faculty_id)]


@router.put("/{paper_id}", response_model=PaperResponse)
async def update_paper(
    paper_id: str,
    body: PaperUpdateRequest,
    actor: Annotated[DirectoryRecord, Depends(get_current_record)],
    svc: Annotated[ResourceService, Depends(get_paper_service)],
):
    view = await svc.update(
        actor,
        paper_id,
        ResourceUpdate(
            name=body.name,
            description=body.description,
            course_id=body.course_id,
            file_url=body.file_url,
            year=body.year,
        ),
    )
    return PaperResponse.from_view(view)


@router.delete("/{paper_id}", status_code=204)
async def delete_paper(
    paper_id: str,
    actor: Annotated[DirectoryRecord, Depends(get_current_record)],
    svc: Annotated[ResourceService, Depends(get_paper_service)],
):
    await svc.delete(actor, paper_id)
