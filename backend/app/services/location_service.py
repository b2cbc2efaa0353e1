"""
Agency and hotel services.

Reference data managed by staff only. Names are unique, compared
case-insensitively, among rows that are not soft-deleted.
"""

import logging
from typing import Any, List

from backend.app.core.exceptions import ConflictError
from backend.app.core.session import CallerContext
from backend.app.models.enums import Action, ResourceType
from backend.app.repositories.base import transaction
from backend.app.repositories.location_repository import AgencyRepository, HotelRepository
from backend.app.schemas.location import AgencyCreate, AgencyUpdate, HotelCreate, HotelUpdate
from backend.app.services.audit import AuditAction
from backend.app.services.base import BaseService, parse_payload

logger = logging.getLogger("fleet.services.locations")


class _NamedReferenceService(BaseService):
    """CRUD shared by agencies and hotels."""

    repository_class = None
    create_schema = None
    update_schema = None
    created_action = None
    updated_action = None
    deleted_action = None

    def __init__(self, db):
        super().__init__(db)
        self.repository = self.repository_class(db)

    async def list(self, caller: CallerContext) -> List[Any]:
        self.require_access(caller)
        return await self.repository.list()

    async def get(self, caller: CallerContext, entity_id: int) -> Any:
        self.require_access(caller)
        entity = await self.repository.get(entity_id)
        if entity is None:
            raise self.not_found(entity_id)
        return entity

    async def create(self, caller: CallerContext, payload: Any) -> Any:
        self.require_mutation(caller, Action.CREATE)
        data = parse_payload(self.create_schema, payload)

        if await self.repository.name_taken(data.name):
            raise ConflictError(self.entity_label, "name")

        entity = self.repository.model(**data.model_dump())
        async with transaction(self.db, f"create {self.entity_label.lower()}", self.entity_label):
            await self.repository.add(entity)
            await self.audit(caller, self.created_action, entity.id, {"name": entity.name})

        logger.info("%s %s created by user %s", self.entity_label, entity.id, caller.user_id)
        return await self.repository.get(entity.id)

    async def update(self, caller: CallerContext, entity_id: int, payload: Any) -> Any:
        self.require_mutation(caller, Action.UPDATE)
        entity = await self.repository.get(entity_id)
        if entity is None:
            raise self.not_found(entity_id)

        changes = parse_payload(self.update_schema, payload).model_dump(exclude_unset=True)
        self.reject_nulls(changes, self.repository.model)

        name = changes.get("name")
        if name is not None and name.lower() != entity.name.lower():
            if await self.repository.name_taken(name, exclude_id=entity.id):
                raise ConflictError(self.entity_label, "name")

        async with transaction(self.db, f"update {self.entity_label.lower()}", self.entity_label):
            await self.repository.apply(entity, changes)
            await self.audit(caller, self.updated_action, entity.id, {"fields": sorted(changes)})

        logger.info("%s %s updated by user %s", self.entity_label, entity.id, caller.user_id)
        return await self.repository.get(entity.id)

    async def delete(self, caller: CallerContext, entity_id: int) -> None:
        self.require_mutation(caller, Action.DELETE)
        entity = await self.repository.get(entity_id)
        if entity is None:
            raise self.not_found(entity_id)

        async with transaction(self.db, f"delete {self.entity_label.lower()}", self.entity_label):
            await self.repository.soft_delete(entity)
            await self.audit(caller, self.deleted_action, entity.id)

        logger.info("%s %s deleted by user %s", self.entity_label, entity_id, caller.user_id)


class AgencyService(_NamedReferenceService):
    resource_type = ResourceType.AGENCY
    resource_label = "agencies"
    entity_label = "Agency"
    repository_class = AgencyRepository
    create_schema = AgencyCreate
    update_schema = AgencyUpdate
    created_action = AuditAction.AGENCY_CREATED
    updated_action = AuditAction.AGENCY_UPDATED
    deleted_action = AuditAction.AGENCY_DELETED


class HotelService(_NamedReferenceService):
    resource_type = ResourceType.HOTEL
    resource_label = "hotels"
    entity_label = "Hotel"
    repository_class = HotelRepository
    create_schema = HotelCreate
    update_schema = HotelUpdate
    created_action = AuditAction.HOTEL_CREATED
    updated_action = AuditAction.HOTEL_UPDATED
    deleted_action = AuditAction.HOTEL_DELETED
