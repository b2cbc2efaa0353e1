"""
Trip service.

Drivers create trips for themselves and may edit the trips they drive;
staff manage every trip. A DRIVER's reads are scoped in SQL to trips
assigned to their own driver profile.
"""

import logging
from typing import Any, Dict, List

from backend.app.core.exceptions import ResourceNotFoundError, ValidationFailedError
from backend.app.core.session import CallerContext
from backend.app.domain import policy
from backend.app.models.enums import Action, ResourceType, TripStatus, UserRole
from backend.app.models.trip import Trip
from backend.app.repositories.base import transaction
from backend.app.repositories.driver_repository import DriverRepository
from backend.app.repositories.location_repository import AgencyRepository, HotelRepository
from backend.app.repositories.trip_repository import TripRepository
from backend.app.repositories.vehicle_repository import VehicleRepository
from backend.app.schemas.trip import TripCreate, TripReferenceData, TripUpdate
from backend.app.schemas.common import NamedRef
from backend.app.schemas.driver import summarize_driver
from backend.app.schemas.vehicle import VehicleSummary
from backend.app.services.audit import AuditAction
from backend.app.services.base import BaseService, parse_payload, restrict_payload

logger = logging.getLogger("fleet.services.trips")

REFERENCE_FIELDS = ("driver_id", "vehicle_id", "agency_id", "hotel_id")


class TripService(BaseService):
    resource_type = ResourceType.TRIP
    resource_label = "trips"
    entity_label = "Trip"

    def __init__(self, db):
        super().__init__(db)
        self.trips = TripRepository(db)
        self.drivers = DriverRepository(db)
        self.vehicles = VehicleRepository(db)
        self.agencies = AgencyRepository(db)
        self.hotels = HotelRepository(db)

    async def list(self, caller: CallerContext) -> List[Trip]:
        self.require_access(caller)
        return await self.trips.list(owner_user_id=self.owner_filter(caller))

    async def get(self, caller: CallerContext, trip_id: int) -> Trip:
        self.require_access(caller)
        trip = await self.trips.get(trip_id)
        if trip is None:
            raise self.not_found(trip_id)
        self.require_view(caller, trip)
        return trip

    async def create(self, caller: CallerContext, payload: Any) -> Trip:
        """
        Create a trip in status SCHEDULED.

        Args:
            caller: Calling user
            payload: TripCreate fields (camelCase or snake_case keys)

        Returns:
            The created trip with its relations loaded

        Raises:
            ValidationFailedError: missing/invalid field, missing driver_id for
                staff, or a DRIVER caller without a driver profile
            ResourceNotFoundError: a referenced row does not exist
        """
        self.require_access(caller, Action.CREATE)
        self.require_mutation(caller, Action.CREATE)
        data = parse_payload(TripCreate, payload)

        if caller.role == UserRole.DRIVER:
            # Drivers always drive their own trips, whatever the payload says
            own_driver = await self.drivers.get_by_user_id(caller.user_id)
            if own_driver is None:
                raise ValidationFailedError("driver_id", "cannot be filled in, current user has no driver profile")
            data.driver_id = own_driver.id
        elif data.driver_id is None:
            raise ValidationFailedError("driver_id", "is required")

        values = data.model_dump()
        await self._check_references(values)

        trip = Trip(**values, status=TripStatus.SCHEDULED, created_by_user_id=caller.user_id)
        async with transaction(self.db, "create trip", self.entity_label):
            await self.trips.add(trip)
            await self.audit(caller, AuditAction.TRIP_CREATED, trip.id, {"driver_id": trip.driver_id})

        logger.info("Trip %s created by user %s", trip.id, caller.user_id)
        return await self.trips.get(trip.id)

    async def update(self, caller: CallerContext, trip_id: int, payload: Any) -> Trip:
        """
        Apply a partial update.

        Fields the caller's role may not write (status and the references for
        a DRIVER) are dropped silently rather than rejected.
        """
        self.require_access(caller, Action.UPDATE)
        trip = await self.trips.get(trip_id)
        if trip is None:
            raise self.not_found(trip_id)
        self.require_mutation(caller, Action.UPDATE, trip)

        allowed = policy.updatable_fields(caller.role, self.resource_type)
        if allowed is not None:
            payload, dropped = restrict_payload(TripUpdate, payload, allowed)
            if dropped:
                logger.info("Dropped fields %s from trip %s update by user %s", dropped, trip_id, caller.user_id)
        changes = parse_payload(TripUpdate, payload).model_dump(exclude_unset=True)

        self.reject_nulls(changes, Trip)

        new_status = changes.get("status")
        if new_status is not None and not policy.is_valid_status_transition(trip.status, new_status):
            raise ValidationFailedError(
                "status", f"cannot change a {trip.status.value} trip to {new_status.value}"
            )

        await self._check_references(
            {field: value for field, value in changes.items() if field in REFERENCE_FIELDS}
        )

        async with transaction(self.db, "update trip", self.entity_label):
            await self.trips.apply(trip, changes)
            await self.audit(caller, AuditAction.TRIP_UPDATED, trip.id, {"fields": sorted(changes)})

        logger.info("Trip %s updated by user %s", trip.id, caller.user_id)
        return await self.trips.get(trip.id)

    async def delete(self, caller: CallerContext, trip_id: int) -> None:
        self.require_access(caller, Action.DELETE)
        trip = await self.trips.get(trip_id)
        if trip is None:
            raise self.not_found(trip_id)
        self.require_mutation(caller, Action.DELETE, trip)

        async with transaction(self.db, "delete trip", self.entity_label):
            await self.trips.soft_delete(trip)
            await self.audit(caller, AuditAction.TRIP_DELETED, trip.id)

        logger.info("Trip %s deleted by user %s", trip_id, caller.user_id)

    async def stats(self, caller: CallerContext) -> Dict[str, int]:
        self.require_access(caller)
        return await self.trips.stats(owner_user_id=self.owner_filter(caller))

    async def reference_data(self, caller: CallerContext) -> TripReferenceData:
        """
        Options for the trip form.

        Agencies and hotels are reduced to id + name for every role; a DRIVER
        only gets their own driver profile and the vehicles assigned to them.
        """
        self.require_access(caller)
        owner = self.owner_filter(caller)
        agencies = await self.agencies.list()
        hotels = await self.hotels.list()
        drivers = await self.drivers.list(owner_user_id=owner)
        vehicles = await self.vehicles.list(owner_user_id=owner)
        return TripReferenceData(
            agencies=[NamedRef(id=a.id, name=a.name) for a in agencies],
            hotels=[NamedRef(id=h.id, name=h.name) for h in hotels],
            drivers=[summarize_driver(d) for d in drivers],
            vehicles=[VehicleSummary.model_validate(v) for v in vehicles],
        )

    async def _check_references(self, values: Dict[str, Any]) -> None:
        """Every referenced row must exist and be live."""
        lookups = (
            ("driver_id", self.drivers, "Driver"),
            ("vehicle_id", self.vehicles, "Vehicle"),
            ("agency_id", self.agencies, "Agency"),
            ("hotel_id", self.hotels, "Hotel"),
        )
        for field, repository, label in lookups:
            entity_id = values.get(field)
            if entity_id is not None and await repository.get(entity_id) is None:
                raise ResourceNotFoundError(label, entity_id)
