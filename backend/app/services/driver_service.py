"""
Driver service.

A DRIVER sees only their own profile; creating, editing and deleting
driver profiles is staff work.
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List

from backend.app.core.exceptions import ConflictError, ResourceNotFoundError, ValidationFailedError
from backend.app.core.session import CallerContext
from backend.app.models.driver import Driver
from backend.app.models.enums import Action, ResourceType, UserRole, UserStatus
from backend.app.repositories.base import transaction
from backend.app.repositories.driver_repository import DriverRepository
from backend.app.repositories.user_repository import UserRepository
from backend.app.repositories.vehicle_repository import VehicleRepository
from backend.app.schemas.driver import DriverCreate, DriverUpdate
from backend.app.services.audit import AuditAction
from backend.app.services.base import BaseService, parse_payload

logger = logging.getLogger("fleet.services.drivers")

DEFAULT_TOP_RATED_LIMIT = 5


class DriverService(BaseService):
    resource_type = ResourceType.DRIVER
    resource_label = "drivers"
    entity_label = "Driver"

    def __init__(self, db, license_expiry_warning_days: int = 30):
        super().__init__(db)
        self.drivers = DriverRepository(db)
        self.users = UserRepository(db)
        self.vehicles = VehicleRepository(db)
        self.license_expiry_warning_days = license_expiry_warning_days

    async def list(self, caller: CallerContext) -> List[Driver]:
        self.require_access(caller)
        return await self.drivers.list(owner_user_id=self.owner_filter(caller))

    async def get(self, caller: CallerContext, driver_id: int) -> Driver:
        self.require_access(caller)
        driver = await self.drivers.get(driver_id)
        if driver is None:
            raise self.not_found(driver_id)
        self.require_view(caller, driver)
        return driver

    async def create(self, caller: CallerContext, payload: Any) -> Driver:
        """
        Create the driver profile of an existing user.

        Raises:
            ResourceNotFoundError: the user does not exist
            ValidationFailedError: the user is not an ACTIVE DRIVER
            ConflictError: the user already has a live profile, or the
                license number is taken by a live driver
        """
        self.require_mutation(caller, Action.CREATE)
        data = parse_payload(DriverCreate, payload)

        user = await self.users.get(data.user_id)
        if user is None:
            raise ResourceNotFoundError("User", data.user_id)
        if user.role != UserRole.DRIVER:
            raise ValidationFailedError("user_id", "must belong to a DRIVER user")
        if user.status != UserStatus.ACTIVE:
            raise ValidationFailedError("user_id", "must belong to an ACTIVE user")
        if await self.drivers.get_by_user_id(user.id) is not None:
            raise ConflictError("Driver", "user_id", "User already has a driver profile")
        if await self.drivers.license_number_taken(data.license_number):
            raise ConflictError("Driver", "license_number")

        driver = Driver(**data.model_dump())
        async with transaction(self.db, "create driver", self.entity_label):
            await self.drivers.add(driver)
            await self.audit(caller, AuditAction.DRIVER_CREATED, driver.id, {"user_id": user.id})

        logger.info("Driver %s created for user %s by user %s", driver.id, user.id, caller.user_id)
        return await self.drivers.get(driver.id)

    async def update(self, caller: CallerContext, driver_id: int, payload: Any) -> Driver:
        self.require_access(caller, Action.UPDATE)
        driver = await self.drivers.get(driver_id)
        if driver is None:
            raise self.not_found(driver_id)
        self.require_mutation(caller, Action.UPDATE, driver)

        changes = parse_payload(DriverUpdate, payload).model_dump(exclude_unset=True)
        self.reject_nulls(changes, Driver)

        license_number = changes.get("license_number")
        if license_number is not None and license_number != driver.license_number:
            if await self.drivers.license_number_taken(license_number, exclude_id=driver.id):
                raise ConflictError("Driver", "license_number")

        async with transaction(self.db, "update driver", self.entity_label):
            await self.drivers.apply(driver, changes)
            await self.audit(caller, AuditAction.DRIVER_UPDATED, driver.id, {"fields": sorted(changes)})

        logger.info("Driver %s updated by user %s", driver.id, caller.user_id)
        return await self.drivers.get(driver.id)

    async def delete(self, caller: CallerContext, driver_id: int) -> None:
        """Soft-delete a driver and close any vehicle assignment they hold."""
        self.require_access(caller, Action.DELETE)
        driver = await self.drivers.get(driver_id)
        if driver is None:
            raise self.not_found(driver_id)
        self.require_mutation(caller, Action.DELETE, driver)

        async with transaction(self.db, "delete driver", self.entity_label):
            closed = await self.vehicles.deactivate_driver_assignments(driver.id)
            await self.drivers.soft_delete(driver)
            await self.audit(caller, AuditAction.DRIVER_DELETED, driver.id, {"closed_assignments": closed})

        logger.info("Driver %s deleted by user %s", driver_id, caller.user_id)

    async def stats(self, caller: CallerContext) -> Dict[str, int]:
        self.require_access(caller)
        return await self.drivers.stats(owner_user_id=self.owner_filter(caller))

    async def expiring_licenses(self, caller: CallerContext) -> List[Driver]:
        """Drivers whose license expires between today and the warning window."""
        self.require_staff(caller, Action.VIEW)
        today = date.today()
        return await self.drivers.licenses_expiring_between(
            today, today + timedelta(days=self.license_expiry_warning_days)
        )

    async def top_rated(self, caller: CallerContext, limit: int = DEFAULT_TOP_RATED_LIMIT) -> List[Driver]:
        self.require_staff(caller, Action.VIEW)
        if limit < 1:
            raise ValidationFailedError("limit", "must be at least 1")
        return await self.drivers.top_rated(limit)
