"""
Maintenance record schemas.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from backend.app.models.enums import MaintenanceType
from backend.app.schemas.common import CamelModel
from backend.app.schemas.vehicle import VehicleSummary


class MaintenanceCreate(CamelModel):
    vehicle_id: int = Field(..., gt=0)
    type: MaintenanceType
    scheduled_date: date
    completed_date: Optional[date] = None
    next_due_date: Optional[date] = None
    cost: float = Field(default=0.0, ge=0)
    description: str = Field(..., min_length=1, max_length=255)
    notes: Optional[str] = None


class MaintenanceUpdate(CamelModel):
    vehicle_id: Optional[int] = Field(None, gt=0)
    type: Optional[MaintenanceType] = None
    scheduled_date: Optional[date] = None
    completed_date: Optional[date] = None
    next_due_date: Optional[date] = None
    cost: Optional[float] = Field(None, ge=0)
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    notes: Optional[str] = None


class MaintenanceResponse(CamelModel):
    id: int
    vehicle_id: int
    vehicle: Optional[VehicleSummary] = None
    type: MaintenanceType
    scheduled_date: date
    completed_date: Optional[date] = None
    next_due_date: Optional[date] = None
    cost: float
    description: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
