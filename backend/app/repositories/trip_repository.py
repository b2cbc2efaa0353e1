"""
Trip repository.

Role-aware queries: an owner filter is pushed into SQL so a DRIVER's
list never touches rows that belong to other drivers.
"""

from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from backend.app.models.driver import Driver
from backend.app.models.enums import TripStatus
from backend.app.models.trip import Trip
from backend.app.repositories.base import SoftDeleteRepository, storage_errors


class TripRepository(SoftDeleteRepository[Trip]):
    model = Trip
    resource = "Trip"

    def load_options(self):
        return (
            selectinload(Trip.driver).selectinload(Driver.user),
            selectinload(Trip.vehicle),
            selectinload(Trip.agency),
            selectinload(Trip.hotel),
        )

    def _owned_by(self, stmt, owner_user_id: Optional[int]):
        if owner_user_id is None:
            return stmt
        return stmt.join(Driver, Trip.driver_id == Driver.id).where(Driver.user_id == owner_user_id)

    async def list(self, owner_user_id: Optional[int] = None) -> List[Trip]:
        stmt = self._owned_by(self.live(), owner_user_id)
        return await self.fetch_all(stmt.order_by(Trip.trip_date.desc(), Trip.id.desc()))

    async def stats(self, owner_user_id: Optional[int] = None) -> Dict[str, int]:
        """Counts per status plus the passenger total, for the dashboard."""
        stmt = select(Trip.status, func.count(Trip.id), func.coalesce(func.sum(Trip.passengers_count), 0)).where(
            Trip.deleted_at.is_(None)
        )
        stmt = self._owned_by(stmt, owner_user_id).group_by(Trip.status)

        counts = {status: 0 for status in TripStatus}
        passengers = 0
        async with storage_errors("trip stats", self.resource):
            result = await self.db.execute(stmt)
            for status, count, passenger_sum in result.all():
                counts[status] = count
                passengers += int(passenger_sum or 0)

        return {
            "total_trips": sum(counts.values()),
            "scheduled_trips": counts[TripStatus.SCHEDULED],
            "assigned_trips": counts[TripStatus.ASSIGNED],
            "in_progress_trips": counts[TripStatus.IN_PROGRESS],
            "completed_trips": counts[TripStatus.COMPLETED],
            "cancelled_trips": counts[TripStatus.CANCELLED],
            "total_passengers": passengers,
        }
