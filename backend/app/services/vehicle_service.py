"""
Vehicle service.

Includes the driver-assignment flow: assigning a driver closes the
vehicle's current assignment and opens a new one in a single transaction,
so a vehicle never has more than one active assignment.
"""

import logging
from typing import Any, Dict, List

from backend.app.core.exceptions import ConflictError, ResourceNotFoundError
from backend.app.core.session import CallerContext
from backend.app.models.driver import Driver
from backend.app.models.enums import Action, DriverStatus, ResourceType
from backend.app.models.vehicle import Vehicle
from backend.app.models.vehicle_assignment import VehicleAssignment
from backend.app.repositories.base import transaction
from backend.app.repositories.driver_repository import DriverRepository
from backend.app.repositories.vehicle_repository import VehicleRepository
from backend.app.schemas.vehicle import AssignDriverRequest, VehicleCreate, VehicleUpdate
from backend.app.services.audit import AuditAction
from backend.app.services.base import BaseService, parse_payload

logger = logging.getLogger("fleet.services.vehicles")


class VehicleService(BaseService):
    resource_type = ResourceType.VEHICLE
    resource_label = "vehicles"
    entity_label = "Vehicle"

    def __init__(self, db):
        super().__init__(db)
        self.vehicles = VehicleRepository(db)
        self.drivers = DriverRepository(db)

    async def list(self, caller: CallerContext) -> List[Vehicle]:
        self.require_access(caller)
        return await self.vehicles.list(owner_user_id=self.owner_filter(caller))

    async def get(self, caller: CallerContext, vehicle_id: int) -> Vehicle:
        self.require_access(caller)
        vehicle = await self.vehicles.get(vehicle_id)
        if vehicle is None:
            raise self.not_found(vehicle_id)
        self.require_view(caller, vehicle)
        return vehicle

    async def create(self, caller: CallerContext, payload: Any) -> Vehicle:
        self.require_mutation(caller, Action.CREATE)
        data = parse_payload(VehicleCreate, payload)

        if await self.vehicles.plate_taken(data.plate):
            raise ConflictError("Vehicle", "plate")
        if await self.vehicles.vin_taken(data.vin):
            raise ConflictError("Vehicle", "vin")

        vehicle = Vehicle(**data.model_dump())
        async with transaction(self.db, "create vehicle", self.entity_label):
            await self.vehicles.add(vehicle)
            await self.audit(caller, AuditAction.VEHICLE_CREATED, vehicle.id, {"plate": vehicle.plate})

        logger.info("Vehicle %s (%s) created by user %s", vehicle.id, vehicle.plate, caller.user_id)
        return await self.vehicles.get(vehicle.id)

    async def update(self, caller: CallerContext, vehicle_id: int, payload: Any) -> Vehicle:
        self.require_access(caller, Action.UPDATE)
        vehicle = await self.vehicles.get(vehicle_id)
        if vehicle is None:
            raise self.not_found(vehicle_id)
        self.require_mutation(caller, Action.UPDATE, vehicle)

        changes = parse_payload(VehicleUpdate, payload).model_dump(exclude_unset=True)
        self.reject_nulls(changes, Vehicle)

        plate = changes.get("plate")
        if plate is not None and plate != vehicle.plate:
            if await self.vehicles.plate_taken(plate, exclude_id=vehicle.id):
                raise ConflictError("Vehicle", "plate")
        vin = changes.get("vin")
        if vin is not None and vin != vehicle.vin:
            if await self.vehicles.vin_taken(vin, exclude_id=vehicle.id):
                raise ConflictError("Vehicle", "vin")

        async with transaction(self.db, "update vehicle", self.entity_label):
            await self.vehicles.apply(vehicle, changes)
            await self.audit(caller, AuditAction.VEHICLE_UPDATED, vehicle.id, {"fields": sorted(changes)})

        logger.info("Vehicle %s updated by user %s", vehicle.id, caller.user_id)
        return await self.vehicles.get(vehicle.id)

    async def delete(self, caller: CallerContext, vehicle_id: int) -> None:
        """Soft-delete a vehicle and close its active assignment."""
        self.require_access(caller, Action.DELETE)
        vehicle = await self.vehicles.get(vehicle_id)
        if vehicle is None:
            raise self.not_found(vehicle_id)
        self.require_mutation(caller, Action.DELETE, vehicle)

        async with transaction(self.db, "delete vehicle", self.entity_label):
            closed = await self.vehicles.deactivate_assignments(vehicle.id)
            await self.vehicles.soft_delete(vehicle)
            await self.audit(caller, AuditAction.VEHICLE_DELETED, vehicle.id, {"closed_assignments": closed})

        logger.info("Vehicle %s deleted by user %s", vehicle_id, caller.user_id)

    async def assign_driver(self, caller: CallerContext, vehicle_id: int, payload: Any) -> VehicleAssignment:
        """
        Make a driver the vehicle's single active driver.

        Args:
            caller: Calling user, MANAGER or above
            vehicle_id: Vehicle to assign
            payload: {"driverId": ...}

        Returns:
            The new active assignment

        Raises:
            InsufficientPermissionsError: caller is not staff
            ResourceNotFoundError: vehicle or driver missing or soft-deleted
            ConflictError: the driver already holds this vehicle
        """
        self.require_staff(caller, Action.UPDATE)
        driver_id = parse_payload(AssignDriverRequest, payload).driver_id

        async with transaction(self.db, "assign driver", "Vehicle assignment"):
            vehicle = await self.vehicles.get_for_update(vehicle_id)
            if vehicle is None:
                raise self.not_found(vehicle_id)
            driver = await self.drivers.get(driver_id)
            if driver is None:
                raise ResourceNotFoundError("Driver", driver_id)

            current = await self.vehicles.active_assignment(vehicle.id)
            if current is not None and current.driver_id == driver.id:
                raise ConflictError("Vehicle assignment", reason="Driver is already assigned to this vehicle")

            await self.vehicles.deactivate_assignments(vehicle.id)
            assignment = await self.vehicles.create_assignment(vehicle.id, driver.id, caller.user_id)
            await self.audit(
                caller,
                AuditAction.DRIVER_ASSIGNED,
                vehicle.id,
                {"driver_id": driver.id, "previous_driver_id": current.driver_id if current else None},
            )

        logger.info("Driver %s assigned to vehicle %s by user %s", driver_id, vehicle_id, caller.user_id)
        return await self.vehicles.active_assignment(assignment.vehicle_id)

    async def unassign_driver(self, caller: CallerContext, vehicle_id: int) -> None:
        self.require_staff(caller, Action.UPDATE)

        async with transaction(self.db, "unassign driver", "Vehicle assignment"):
            vehicle = await self.vehicles.get_for_update(vehicle_id)
            if vehicle is None:
                raise self.not_found(vehicle_id)
            current = await self.vehicles.active_assignment(vehicle.id)
            if current is None:
                raise ResourceNotFoundError("Active assignment for vehicle", vehicle_id)
            await self.vehicles.deactivate_assignments(vehicle.id)
            await self.audit(caller, AuditAction.DRIVER_UNASSIGNED, vehicle.id, {"driver_id": current.driver_id})

        logger.info("Vehicle %s unassigned by user %s", vehicle_id, caller.user_id)

    async def assignments(self, caller: CallerContext, vehicle_id: int) -> List[VehicleAssignment]:
        """Assignment history of a vehicle, newest first."""
        self.require_staff(caller, Action.VIEW)
        if await self.vehicles.get(vehicle_id, include_deleted=True) is None:
            raise self.not_found(vehicle_id)
        return await self.vehicles.assignments(vehicle_id)

    async def available_drivers(self, caller: CallerContext) -> List[Driver]:
        """Live drivers in status AVAILABLE, for the assignment picker."""
        self.require_staff(caller, Action.VIEW)
        return await self.drivers.list_by_status(DriverStatus.AVAILABLE)

    async def stats(self, caller: CallerContext) -> Dict[str, int]:
        self.require_access(caller)
        return await self.vehicles.stats(owner_user_id=self.owner_filter(caller))
