"""
Maintenance record service. Staff only.
"""

import logging
from typing import Any, List, Optional

from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.core.session import CallerContext
from backend.app.models.enums import Action, ResourceType
from backend.app.models.maintenance_record import MaintenanceRecord
from backend.app.repositories.base import transaction
from backend.app.repositories.maintenance_repository import MaintenanceRepository
from backend.app.repositories.vehicle_repository import VehicleRepository
from backend.app.schemas.maintenance import MaintenanceCreate, MaintenanceUpdate
from backend.app.services.audit import AuditAction
from backend.app.services.base import BaseService, parse_payload

logger = logging.getLogger("fleet.services.maintenance")


class MaintenanceService(BaseService):
    resource_type = ResourceType.MAINTENANCE_RECORD
    resource_label = "maintenance records"
    entity_label = "Maintenance record"

    def __init__(self, db):
        super().__init__(db)
        self.records = MaintenanceRepository(db)
        self.vehicles = VehicleRepository(db)

    async def list(self, caller: CallerContext, vehicle_id: Optional[int] = None) -> List[MaintenanceRecord]:
        self.require_access(caller)
        return await self.records.list(vehicle_id=vehicle_id)

    async def get(self, caller: CallerContext, record_id: int) -> MaintenanceRecord:
        self.require_access(caller)
        record = await self.records.get(record_id)
        if record is None:
            raise self.not_found(record_id)
        return record

    async def create(self, caller: CallerContext, payload: Any) -> MaintenanceRecord:
        self.require_mutation(caller, Action.CREATE)
        data = parse_payload(MaintenanceCreate, payload)
        await self._require_vehicle(data.vehicle_id)

        record = MaintenanceRecord(**data.model_dump())
        async with transaction(self.db, "create maintenance record", self.entity_label):
            await self.records.add(record)
            await self.audit(caller, AuditAction.MAINTENANCE_CREATED, record.id, {"vehicle_id": record.vehicle_id})

        logger.info("Maintenance record %s created by user %s", record.id, caller.user_id)
        return await self.records.get(record.id)

    async def update(self, caller: CallerContext, record_id: int, payload: Any) -> MaintenanceRecord:
        self.require_mutation(caller, Action.UPDATE)
        record = await self.records.get(record_id)
        if record is None:
            raise self.not_found(record_id)

        changes = parse_payload(MaintenanceUpdate, payload).model_dump(exclude_unset=True)
        self.reject_nulls(changes, MaintenanceRecord)
        if changes.get("vehicle_id") not in (None, record.vehicle_id):
            await self._require_vehicle(changes["vehicle_id"])

        async with transaction(self.db, "update maintenance record", self.entity_label):
            await self.records.apply(record, changes)
            await self.audit(caller, AuditAction.MAINTENANCE_UPDATED, record.id, {"fields": sorted(changes)})

        logger.info("Maintenance record %s updated by user %s", record.id, caller.user_id)
        return await self.records.get(record.id)

    async def delete(self, caller: CallerContext, record_id: int) -> None:
        self.require_mutation(caller, Action.DELETE)
        record = await self.records.get(record_id)
        if record is None:
            raise self.not_found(record_id)

        async with transaction(self.db, "delete maintenance record", self.entity_label):
            await self.records.soft_delete(record)
            await self.audit(caller, AuditAction.MAINTENANCE_DELETED, record.id)

        logger.info("Maintenance record %s deleted by user %s", record_id, caller.user_id)

    async def _require_vehicle(self, vehicle_id: int) -> None:
        if await self.vehicles.get(vehicle_id) is None:
            raise ResourceNotFoundError("Vehicle", vehicle_id)
