"""
Maintenance record repository.
"""

from typing import List, Optional

from sqlalchemy.orm import selectinload

from backend.app.models.maintenance_record import MaintenanceRecord
from backend.app.repositories.base import SoftDeleteRepository


class MaintenanceRepository(SoftDeleteRepository[MaintenanceRecord]):
    model = MaintenanceRecord
    resource = "Maintenance record"

    def load_options(self):
        return (selectinload(MaintenanceRecord.vehicle),)

    async def list(self, vehicle_id: Optional[int] = None) -> List[MaintenanceRecord]:
        stmt = self.live()
        if vehicle_id is not None:
            stmt = stmt.where(MaintenanceRecord.vehicle_id == vehicle_id)
        stmt = stmt.order_by(MaintenanceRecord.scheduled_date.desc(), MaintenanceRecord.id.desc())
        return await self.fetch_all(stmt)
