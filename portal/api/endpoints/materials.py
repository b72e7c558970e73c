"""Course material endpoints (mounted under /faculty/materials)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from portal.api.dependencies import get_current_record, get_material_service, require_action
from portal.application.dtos.resources import ResourceCreate, ResourceUpdate
from portal.application.services import ResourceService
from portal.domain.entities.directory import DirectoryRecord
from portal.domain.enums import Action
from portal.schemas.resources import (
    MaterialCreateRequest,
    MaterialResponse,
    MaterialUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=list[MaterialResponse])
async def list_materials(
    _: Annotated[DirectoryRecord, Depends(require_action(Action.MATERIAL_LIST))],
    svc: Annotated[ResourceService, Depends(get_material_service)],
):
    """All materials, newest first."""
    return [MaterialResponse.from_view(v) for v in await svc.list_all()]


@router.post("", response_model=MaterialResponse, status_code=201)
async def create_material(
    body: MaterialCreateRequest,
    actor: Annotated[DirectoryRecord, Depends(get_current_record)],
    svc: Annotated[ResourceService, Depends(get_material_service)],
):
    """Publish a material owned by the signed-in faculty member."""
    view = await svc.create(
        actor,
        ResourceCreate(
            course_id=body.course_id,
            name=body.name.strip(),
            description=body.description.strip(),
            file_url=body.file_url,
        ),
    )
    return MaterialResponse.from_view(view)


@router.get("/{faculty_id}", response_model=list[MaterialResponse])
async def list_faculty_materials(
    faculty_id: str,
    _: Annotated[DirectoryRecord, Depends(require_action(Action.MATERIAL_LIST))],
    svc: Annotated[ResourceService, Depends(get_material_service)],
):
    return [MaterialResponse.from_view(v) for v in await svc.list_by_faculty(faculty_id)]


@router.put("/{material_id}", response_model=MaterialResponse)
async def update_material(
    material_id: str,
    body: MaterialUpdateRequest,
    actor: Annotated[DirectoryRecord, Depends(get_current_record)],
    svc: Annotated[ResourceService, Depends(get_material_service)],
):
    view = await svc.update(
        actor,
        material_id,
        ResourceUpdate(
            name=body.name,
            description=body.description,
            course_id=body.course_id,
            file_url=body.file_url,
        ),
    )
    return MaterialResponse.from_view(view)


@router.delete("/{material_id}", status_code=204)
async def delete_material(
    material_id: str,
    actor: Annotated[DirectoryRecord, Depends(get_current_record)],
    svc: Annotated[ResourceService, Depends(get_material_service)],
):
    await svc.delete(actor, material_id)
