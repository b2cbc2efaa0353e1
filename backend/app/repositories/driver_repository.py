"""
Driver repository.
"""

from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from backend.app.models.driver import Driver
from backend.app.models.enums import DriverStatus
from backend.app.repositories.base import SoftDeleteRepository, storage_errors


class DriverRepository(SoftDeleteRepository[Driver]):
    model = Driver
    resource = "Driver"

    def load_options(self):
        return (selectinload(Driver.user),)

    def _owned_by(self, stmt, owner_user_id: Optional[int]):
        if owner_user_id is None:
            return stmt
        return stmt.where(Driver.user_id == owner_user_id)

    async def list(self, owner_user_id: Optional[int] = None) -> List[Driver]:
        stmt = self._owned_by(self.live(), owner_user_id)
        return await self.fetch_all(stmt.order_by(Driver.created_at.desc(), Driver.id.desc()))

    async def get_by_user_id(self, user_id: int) -> Optional[Driver]:
        return await self.fetch_one(self.live().where(Driver.user_id == user_id))

    async def license_number_taken(self, license_number: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(func.count(Driver.id)).where(
            Driver.license_number == license_number,
            Driver.deleted_at.is_(None),
        )
        if exclude_id is not None:
            stmt = stmt.where(Driver.id != exclude_id)
        return (await self.scalar(stmt)) > 0

    async def list_by_status(self, status: DriverStatus) -> List[Driver]:
        stmt = self.live().where(Driver.status == status)
        return await self.fetch_all(stmt.order_by(Driver.created_at.desc()))

    async def top_rated(self, limit: int) -> List[Driver]:
        stmt = self.live().order_by(Driver.average_rating.desc(), Driver.id).limit(limit)
        return await self.fetch_all(stmt)

    async def licenses_expiring_between(self, start: date, end: date) -> List[Driver]:
        stmt = self.live().where(Driver.license_expiry >= start, Driver.license_expiry <= end)
        return await self.fetch_all(stmt.order_by(Driver.license_expiry.asc()))

    async def stats(self, owner_user_id: Optional[int] = None) -> Dict[str, int]:
        stmt = select(Driver.status, func.count(Driver.id)).where(Driver.deleted_at.is_(None))
        stmt = self._owned_by(stmt, owner_user_id).group_by(Driver.status)

        counts = {status: 0 for status in DriverStatus}
        async with storage_errors("driver stats", self.resource):
            result = await self.db.execute(stmt)
            for status, count in result.all():
                counts[status] = count

        return {
            "total_drivers": sum(counts.values()),
            "available_drivers": counts[DriverStatus.AVAILABLE],
            "on_trip_drivers": counts[DriverStatus.ON_TRIP],
            "off_duty_drivers": counts[DriverStatus.OFF_DUTY],
        }
