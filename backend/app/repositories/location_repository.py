"""
Agency and hotel repositories.

Both are shared reference data, so neither has an owner filter.
"""

from typing import Optional

from sqlalchemy import func, select

from backend.app.models.location import Agency, Hotel
from backend.app.repositories.base import SoftDeleteRepository


class _NamedRepository(SoftDeleteRepository):
    """Reference table whose name is unique (case-insensitive) among live rows."""

    async def list(self) -> list:
        return await self.fetch_all(self.live().order_by(self.model.name.asc(), self.model.id.asc()))

    async def name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(func.count(self.model.id)).where(
            func.lower(self.model.name) == name.strip().lower(),
            self.model.deleted_at.is_(None),
        )
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        return (await self.scalar(stmt)) > 0


class AgencyRepository(_NamedRepository):
    model = Agency
    resource = "Agency"


class HotelRepository(_NamedRepository):
    model = Hotel
    resource = "Hotel"
