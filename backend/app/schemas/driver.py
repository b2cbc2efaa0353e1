"""
Driver schemas.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from backend.app.models.enums import DriverStatus
from backend.app.schemas.common import CamelModel


class DriverCreate(CamelModel):
    """Creates the driver profile of an existing DRIVER user."""
    user_id: int = Field(..., gt=0, description="Owning user, must have role DRIVER")
    license_number: str = Field(..., min_length=1, max_length=100)
    license_expiry: date
    status: DriverStatus = DriverStatus.AVAILABLE


class DriverUpdate(CamelModel):
    license_number: Optional[str] = Field(None, min_length=1, max_length=100)
    license_expiry: Optional[date] = None
    status: Optional[DriverStatus] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    total_trips: Optional[int] = Field(None, ge=0)
    total_km: Optional[float] = Field(None, ge=0)
    average_rating: Optional[float] = Field(None, ge=0, le=5)


class DriverUserSummary(CamelModel):
    id: int
    name: str
    email: str
    phone: str


class DriverResponse(CamelModel):
    id: int
    user_id: int
    user: Optional[DriverUserSummary] = None
    status: DriverStatus
    license_number: str
    license_expiry: date
    rating: float
    total_trips: int
    total_km: float
    average_rating: float
    created_at: datetime
    updated_at: datetime


class DriverSummary(CamelModel):
    """Driver as shown next to a trip or vehicle."""
    id: int
    name: Optional[str] = None
    license_number: str
    status: DriverStatus


class DriverStats(CamelModel):
    total_drivers: int
    available_drivers: int
    on_trip_drivers: int
    off_duty_drivers: int


def summarize_driver(driver) -> Optional[DriverSummary]:
    """Build a DriverSummary from a Driver whose user relation is loaded."""
    if driver is None:
        return None
    return DriverSummary(
        id=driver.id,
        name=driver.user.name if driver.user is not None else None,
        license_number=driver.license_number,
        status=driver.status,
    )
