"""Course catalog endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from portal.api.dependencies import get_course_service, require_action
from portal.application.dtos.course import CourseCreate, CourseUpdate
from portal.application.services import CourseService
from portal.domain.entities.directory import DirectoryRecord
from portal.domain.enums import Action
from portal.schemas.course import CourseCreateRequest, CourseResponse, CourseUpdateRequest

router = APIRouter()


@router.get("", response_model=list[CourseResponse])
async def list_courses(
    _: Annotated[DirectoryRecord, Depends(require_action(Action.COURSE_LIST))],
    svc: Annotated[CourseService, Depends(get_course_service)],
):
    """All courses, ordered by name."""
    return [CourseResponse.model_validate(c) for c in await svc.list_courses()]


@router.post("", response_model=CourseResponse, status_code=201)
async def create_course(
    body: CourseCreateRequest,
    _: Annotated[DirectoryRecord, Depends(require_action(Action.COURSE_CREATE))],
    svc: Annotated[CourseService, Depends(get_course_service)],
):
    course = await svc.create_course(CourseCreate(name=body.name, description=body.description))
    return CourseResponse.model_validate(course)


@router.put("/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: str,
    body: CourseUpdateRequest,
    _: Annotated[DirectoryRecord, Depends(require_action(Action.COURSE_UPDATE))],
    svc: Annotated[CourseService, Depends(get_course_service)],
):
    course = await svc.update_course(
        course_id, CourseUpdate(name=body.name, description=body.description)
    )
    return CourseResponse.model_validate(course)


@router.delete("/{course_id}", status_code=204)
async def delete_course(
    course_id: str,
    _: Annotated[DirectoryRecord, Depends(require_action(Action.COURSE_DELETE))],
    svc: Annotated[CourseService, Depends(get_course_service)],
):
    """Delete a course and unlink it from every record (409 if it is a sole course)."""
    await svc.delete_course(course_id)
