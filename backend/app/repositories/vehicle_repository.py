"""
Vehicle and vehicle-assignment repository.
"""

from typing import Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import selectinload

from backend.app.db.session import utcnow
from backend.app.models.driver import Driver
from backend.app.models.enums import VehicleStatus
from backend.app.models.vehicle import Vehicle
from backend.app.models.vehicle_assignment import VehicleAssignment
from backend.app.repositories.base import SoftDeleteRepository, storage_errors


class VehicleRepository(SoftDeleteRepository[Vehicle]):
    model = Vehicle
    resource = "Vehicle"

    def load_options(self):
        return (
            selectinload(Vehicle.active_assignments)
            .selectinload(VehicleAssignment.driver)
            .selectinload(Driver.user),
        )

    def _owned_by(self, stmt, owner_user_id: Optional[int]):
        """Restrict to vehicles whose active assignment belongs to the user's driver profile."""
        if owner_user_id is None:
            return stmt
        assigned = (
            select(VehicleAssignment.vehicle_id)
            .join(Driver, VehicleAssignment.driver_id == Driver.id)
            .where(VehicleAssignment.is_active.is_(True), Driver.user_id == owner_user_id)
        )
        return stmt.where(Vehicle.id.in_(assigned))

    async def list(self, owner_user_id: Optional[int] = None) -> List[Vehicle]:
        stmt = self._owned_by(self.live(), owner_user_id)
        return await self.fetch_all(stmt.order_by(Vehicle.plate.asc()))

    async def get_for_update(self, vehicle_id: int) -> Optional[Vehicle]:
        """Load a live vehicle and lock its row for the rest of the transaction."""
        return await self.fetch_one(self.live().where(Vehicle.id == vehicle_id).with_for_update())

    async def plate_taken(self, plate: str, exclude_id: Optional[int] = None) -> bool:
        return await self._taken(Vehicle.plate, plate, exclude_id)

    async def vin_taken(self, vin: str, exclude_id: Optional[int] = None) -> bool:
        return await self._taken(Vehicle.vin, vin, exclude_id)

    async def _taken(self, column, value: str, exclude_id: Optional[int]) -> bool:
        stmt = select(func.count(Vehicle.id)).where(column == value, Vehicle.deleted_at.is_(None))
        if exclude_id is not None:
            stmt = stmt.where(Vehicle.id != exclude_id)
        return (await self.scalar(stmt)) > 0

    async def stats(self, owner_user_id: Optional[int] = None) -> Dict[str, int]:
        stmt = select(Vehicle.status, func.count(Vehicle.id)).where(Vehicle.deleted_at.is_(None))
        stmt = self._owned_by(stmt, owner_user_id).group_by(Vehicle.status)

        counts = {status: 0 for status in VehicleStatus}
        async with storage_errors("vehicle stats", self.resource):
            result = await self.db.execute(stmt)
            for status, count in result.all():
                counts[status] = count

        return {
            "total_vehicles": sum(counts.values()),
            "available_vehicles": counts[VehicleStatus.AVAILABLE],
            "in_use_vehicles": counts[VehicleStatus.IN_USE],
            "maintenance_vehicles": counts[VehicleStatus.MAINTENANCE],
        }

    # Assignments

    async def active_assignment(self, vehicle_id: int) -> Optional[VehicleAssignment]:
        async with storage_errors("load assignment", "Vehicle assignment"):
            result = await self.db.execute(
                select(VehicleAssignment)
                .options(selectinload(VehicleAssignment.driver).selectinload(Driver.user))
                .where(VehicleAssignment.vehicle_id == vehicle_id, VehicleAssignment.is_active.is_(True))
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()

    async def assignments(self, vehicle_id: int) -> List[VehicleAssignment]:
        """Full assignment history for a vehicle, newest first."""
        async with storage_errors("list assignments", "Vehicle assignment"):
            result = await self.db.execute(
                select(VehicleAssignment)
                .options(selectinload(VehicleAssignment.driver).selectinload(Driver.user))
                .where(VehicleAssignment.vehicle_id == vehicle_id)
                .order_by(VehicleAssignment.assigned_at.desc(), VehicleAssignment.id.desc())
                .execution_options(populate_existing=True)
            )
            return list(result.scalars().all())

    async def deactivate_assignments(self, vehicle_id: int) -> int:
        """Close every active assignment of the vehicle. Returns how many were closed."""
        async with storage_errors("unassign driver", "Vehicle assignment"):
            result = await self.db.execute(
                update(VehicleAssignment)
                .where(VehicleAssignment.vehicle_id == vehicle_id, VehicleAssignment.is_active.is_(True))
                .values(is_active=False, unassigned_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            return result.rowcount or 0

    async def create_assignment(
        self,
        vehicle_id: int,
        driver_id: int,
        assigned_by_user_id: Optional[int]
    ) -> VehicleAssignment:
        assignment = VehicleAssignment(
            vehicle_id=vehicle_id,
            driver_id=driver_id,
            assigned_by_user_id=assigned_by_user_id,
            is_active=True,
            assigned_at=utcnow(),
        )
        async with storage_errors("assign driver", "Vehicle assignment"):
            self.db.add(assignment)
            await self.db.flush()
        return assignment

    async def deactivate_driver_assignments(self, driver_id: int) -> int:
        """Close every active assignment held by the driver."""
        async with storage_errors("unassign driver", "Vehicle assignment"):
            result = await self.db.execute(
                update(VehicleAssignment)
                .where(VehicleAssignment.driver_id == driver_id, VehicleAssignment.is_active.is_(True))
                .values(is_active=False, unassigned_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            return result.rowcount or 0
