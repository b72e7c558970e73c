"""Student administration endpoints (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from portal.api.dependencies import get_directory_service, require_action
from portal.application.dtos.directory import StudentCreate, StudentUpdate
from portal.application.services import DirectoryService
from portal.domain.entities.directory import DirectoryRecord
from portal.domain.enums import Action
from portal.schemas.directory import (
    StudentCreateRequest,
    StudentResponse,
    StudentUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=list[StudentResponse])
async def list_students(
    _: Annotated[DirectoryRecord, Depends(require_action(Action.STUDENT_LIST))],
    svc: Annotated[DirectoryService, Depends(get_directory_service)],
):
    return [StudentResponse.model_validate(r) for r in await svc.list_students()]


@router.post("", response_model=StudentResponse, status_code=201)
async def create_student(
    body: StudentCreateRequest,
    _: Annotated[DirectoryRecord, Depends(require_action(Action.STUDENT_CREATE))],
    svc: Annotated[DirectoryService, Depends(get_directory_service)],
):
    """Pre-provision a student by institutional email."""
    record = await svc.create_student(
        StudentCreate(email=body.email, name=body.name, course_ids=body.course_ids)
    )
    return StudentResponse.model_validate(record)


@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: str,
    body: StudentUpdateRequest,
    _: Annotated[DirectoryRecord, Depends(require_action(Action.STUDENT_UPDATE))],
    svc: Annotated[DirectoryService, Depends(get_directory_service)],
):
    record = await svc.update_student(
        student_id,
        StudentUpdate(
            name=body.name,
            email=body.email,
            join_date=body.join_date,
            course_ids=body.course_ids,
        ),
    )
    return StudentResponse.model_validate(record)


@router.delete("/{student_id}", status_code=204)
async def delete_student(
    student_id: str,
    _: Annotated[DirectoryRecord, Depends(require_action(Action.STUDENT_DELETE))],
    svc: Annotated[DirectoryService, Depends(get_directory_service)],
):
    await svc.delete_student(student_id)
