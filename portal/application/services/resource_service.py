"""Materials and previous-year papers: listing and owner-scoped CRUD.

The owner of a new item is the acting faculty record. Update and delete
run the authorization gate with the stored owner id, so faculty can only
touch their own items while admins can touch any.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from portal.application.dtos.directory import NOT_ASSIGNED
from portal.application.dtos.resources import (
    UNKNOWN_FACULTY,
    ResourceCreate,
    ResourceUpdate,
    ResourceView,
)
from portal.application.interfaces.repositories import (
    ICourseRepository,
    IDirectoryRepository,
    IResourceRepository,
)
from portal.application.services.authorization_service import AuthorizationService
from portal.domain.entities.directory import DirectoryRecord
from portal.domain.entities.resources import Material, PreviousYearPaper
from portal.domain.enums import Action
from portal.domain.exceptions import ResourceNotFoundException, ValidationException
from portal.shared.utils import generate_cuid, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceKind:
    """Names and gated actions for one kind of published file."""

    resource_type: str
    entity: type[Material]
    create_action: Action
    update_action: Action
    delete_action: Action
    requires_year: bool = False


MATERIAL_KIND = ResourceKind(
    resource_type="material",
    entity=Material,
    create_action=Action.MATERIAL_CREATE,
    update_action=Action.MATERIAL_UPDATE,
    delete_action=Action.MATERIAL_DELETE,
)

PAPER_KIND = ResourceKind(
    resource_type="paper",
    entity=PreviousYearPaper,
    create_action=Action.PAPER_CREATE,
    update_action=Action.PAPER_UPDATE,
    delete_action=Action.PAPER_DELETE,
    requires_year=True,
)


class ResourceService:
    """CRUD for one resource kind (materials or papers)."""

    def __init__(
        self,
        kind: ResourceKind,
        resource_repo: IResourceRepository,
        directory_repo: IDirectoryRepository,
        course_repo: ICourseRepository,
        authorization: AuthorizationService,
    ) -> None:
        self._kind = kind
        self._repo = resource_repo
        self._directory_repo = directory_repo
        self._course_repo = course_repo
        self._authorization = authorization

    async def to_views(self, items: list[Material]) -> list[ResourceView]:
        """Attach faculty and course display names ("Unknown" / "Not Assigned" when gone)."""
        owner_names: dict[str, str] = {}
        for owner_id in {i.faculty_id for i in items}:
            owner = await self._directory_repo.get_by_id(owner_id)
            if owner is not None:
                owner_names[owner_id] = owner.display_name or owner.email
        courses = await self._course_repo.get_many([i.course_id for i in items])
        return [
            ResourceView(
                item=i,
                faculty_name=owner_names.get(i.faculty_id, UNKNOWN_FACULTY),
                course_name=courses[i.course_id].name if i.course_id in courses else NOT_ASSIGNED,
            )
            for i in items
        ]

    async def _require_course(self, course_id: str) -> None:
        if not course_id or await self._course_repo.get_by_id(course_id) is None:
            raise ResourceNotFoundException("course", course_id or "")

    async def _get(self, item_id: str) -> Material:
        item = await self._repo.get_by_id(item_id)
        if item is None:
            raise ResourceNotFoundException(self._kind.resource_type, item_id)
        return item

    async def list_all(self) -> list[ResourceView]:
        return await self.to_views(await self._repo.list_all())

    async def list_by_faculty(self, faculty_id: str) -> list[ResourceView]:
        return await self.to_views(await self._repo.list_by_faculty(faculty_id))

    async def create(self, actor: DirectoryRecord, data: ResourceCreate) -> ResourceView:
        """Publish an item owned by actor (must be faculty)."""
        self._authorization.require(actor, self._kind.create_action)
        if self._kind.requires_year and data.year is None:
            raise ValidationException("Year is required", field="year")
        await self._require_course(data.course_id)
        now = utc_now()
        fields = dict(
            id=generate_cuid(),
            faculty_id=actor.id,
            course_id=data.course_id,
            name=data.name,
            description=data.description,
            file_url=data.file_url,
            upload_date=now,
            created_at=now,
            updated_at=now,
        )
        if self._kind.requires_year:
            fields["year"] = data.year
        item = self._kind.entity(**fields)
        await self._repo.create(item)
        logger.info(
            "%s created: id=%s faculty=%s", self._kind.resource_type, item.id, actor.id
        )
        return (await self.to_views([item]))[0]

    async def update(
        self, actor: DirectoryRecord, item_id: str, data: ResourceUpdate
    ) -> ResourceView:
        item = await self._get(item_id)
        self._authorization.require(actor, self._kind.update_action, owner_id=item.faculty_id)
        if data.course_id is not None and data.course_id != item.course_id:
            await self._require_course(data.course_id)
            item.course_id = data.course_id
        if data.name is not None:
            item.name = data.name.strip()
        if data.description is not None:
            item.description = data.description.strip()
        if data.file_url is not None:
            item.file_url = data.file_url
        if isinstance(item, PreviousYearPaper) and data.year is not None:
            item.year = data.year
        item.validate()
        await self._repo.save(item)
        return (await self.to_views([item]))[0]

    async def delete(self, actor: DirectoryRecord, item_id: str) -> None:
        item = await self._get(item_id)
        self._authorization.require(actor, self._kind.delete_action, owner_id=item.faculty_id)
        await self._repo.delete(item_id)
        logger.info(
            "%s deleted: id=%s by=%s", self._kind.resource_type, item_id, actor.id
        )
