"""
Vehicle and vehicle-assignment schemas.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from backend.app.models.enums import VehicleStatus
from backend.app.schemas.common import CamelModel
from backend.app.schemas.driver import DriverSummary, summarize_driver


class VehicleCreate(CamelModel):
    model: str = Field(..., min_length=1, max_length=100)
    plate: str = Field(..., min_length=1, max_length=50, description="Unique among live vehicles")
    vin: str = Field(..., min_length=1, max_length=50, description="Unique among live vehicles")
    capacity: int = Field(..., gt=0, description="Passenger seats")
    monthly_rent: float = Field(..., ge=0)
    registration_expiry: Optional[date] = None
    salik: float = Field(default=0.0, ge=0)
    owner: Optional[str] = Field(None, max_length=150)
    km_usage: float = Field(default=0.0, ge=0)
    status: VehicleStatus = VehicleStatus.AVAILABLE
    last_maintenance: Optional[date] = None
    next_maintenance_date: Optional[date] = None


class VehicleUpdate(CamelModel):
    model: Optional[str] = Field(None, min_length=1, max_length=100)
    plate: Optional[str] = Field(None, min_length=1, max_length=50)
    vin: Optional[str] = Field(None, min_length=1, max_length=50)
    capacity: Optional[int] = Field(None, gt=0)
    monthly_rent: Optional[float] = Field(None, ge=0)
    registration_expiry: Optional[date] = None
    salik: Optional[float] = Field(None, ge=0)
    owner: Optional[str] = Field(None, max_length=150)
    km_usage: Optional[float] = Field(None, ge=0)
    status: Optional[VehicleStatus] = None
    last_maintenance: Optional[date] = None
    next_maintenance_date: Optional[date] = None


class AssignDriverRequest(CamelModel):
    driver_id: int = Field(..., gt=0)


class VehicleAssignmentResponse(CamelModel):
    id: int
    vehicle_id: int
    driver_id: int
    driver: Optional[DriverSummary] = None
    assigned_by_user_id: Optional[int] = None
    is_active: bool
    assigned_at: datetime
    unassigned_at: Optional[datetime] = None


class VehicleResponse(CamelModel):
    id: int
    model: str
    plate: str
    vin: str
    capacity: int
    monthly_rent: float
    registration_expiry: Optional[date] = None
    salik: float
    owner: Optional[str] = None
    km_usage: float
    status: VehicleStatus
    last_maintenance: Optional[date] = None
    next_maintenance_date: Optional[date] = None
    assigned_driver: Optional[DriverSummary] = None
    created_at: datetime
    updated_at: datetime


class VehicleSummary(CamelModel):
    id: int
    plate: str
    model: str
    capacity: int


class VehicleStats(CamelModel):
    total_vehicles: int
    available_vehicles: int
    in_use_vehicles: int
    maintenance_vehicles: int


def vehicle_response(vehicle) -> VehicleResponse:
    """Serialize a Vehicle loaded with its active assignment."""
    response = VehicleResponse.model_validate(vehicle)
    assignment = vehicle.active_assignment
    if assignment is not None:
        response.assigned_driver = summarize_driver(assignment.driver)
    return response


def assignment_response(assignment) -> VehicleAssignmentResponse:
    response = VehicleAssignmentResponse.model_validate(assignment)
    response.driver = summarize_driver(assignment.driver)
    return response
