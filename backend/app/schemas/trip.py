"""
Trip schemas.

Create/update payloads, the trip response with its related summaries,
dashboard stats and the reference data behind the trip form.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field

from backend.app.models.enums import TripStatus, TripType
from backend.app.schemas.common import HHMM_PATTERN, CamelModel, NamedRef
from backend.app.schemas.driver import DriverSummary, summarize_driver
from backend.app.schemas.vehicle import VehicleSummary


class TripCreate(CamelModel):
    """
    Schema for creating a trip.

    driver_id is ignored for DRIVER callers (they always drive their own
    trips) and required for everyone else.
    """
    trip_date: date
    departure_time: str = Field(..., pattern=HHMM_PATTERN, description="HH:MM")
    estimated_arrival_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    pickup_location: str = Field(..., min_length=1, max_length=255)
    dropoff_location: Optional[str] = Field(None, max_length=255)
    destination: str = Field(..., min_length=1, max_length=255)
    type: TripType = TripType.OUT
    passengers_count: int = Field(..., gt=0)
    km_start: float = Field(..., ge=0)
    trip_price: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    driver_id: Optional[int] = Field(None, gt=0)
    vehicle_id: int = Field(..., gt=0)
    agency_id: int = Field(..., gt=0)
    hotel_id: int = Field(..., gt=0)


class TripUpdate(CamelModel):
    """Partial update; only keys present in the payload are applied."""
    trip_date: Optional[date] = None
    departure_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    estimated_arrival_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    actual_arrival_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    pickup_location: Optional[str] = Field(None, min_length=1, max_length=255)
    dropoff_location: Optional[str] = Field(None, max_length=255)
    destination: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[TripType] = None
    status: Optional[TripStatus] = None
    passengers_count: Optional[int] = Field(None, gt=0)
    km_start: Optional[float] = Field(None, ge=0)
    km_end: Optional[float] = Field(None, ge=0)
    distance_travelled: Optional[float] = Field(None, ge=0)
    trip_price: Optional[float] = Field(None, ge=0)
    actual_cost: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    driver_id: Optional[int] = Field(None, gt=0)
    vehicle_id: Optional[int] = Field(None, gt=0)
    agency_id: Optional[int] = Field(None, gt=0)
    hotel_id: Optional[int] = Field(None, gt=0)


class TripResponse(CamelModel):
    """Schema for trip response, with driver/vehicle/agency/hotel summaries."""
    id: int
    trip_date: date
    departure_time: str
    estimated_arrival_time: Optional[str] = None
    actual_arrival_time: Optional[str] = None
    pickup_location: str
    dropoff_location: Optional[str] = None
    destination: str
    type: TripType
    status: TripStatus
    passengers_count: int
    km_start: float
    km_end: Optional[float] = None
    distance_travelled: Optional[float] = None
    trip_price: Optional[float] = None
    actual_cost: Optional[float] = None
    notes: Optional[str] = None
    driver_id: int
    vehicle_id: int
    agency_id: int
    hotel_id: int
    driver: Optional[DriverSummary] = None
    vehicle: Optional[VehicleSummary] = None
    agency: Optional[NamedRef] = None
    hotel: Optional[NamedRef] = None
    created_at: datetime
    updated_at: datetime


class TripStats(CamelModel):
    total_trips: int
    scheduled_trips: int
    assigned_trips: int
    in_progress_trips: int
    completed_trips: int
    cancelled_trips: int
    total_passengers: int


class TripReferenceData(CamelModel):
    """Options for the trip form."""
    agencies: List[NamedRef] = []
    hotels: List[NamedRef] = []
    drivers: List[DriverSummary] = []
    vehicles: List[VehicleSummary] = []


def trip_response(trip) -> TripResponse:
    """Serialize a Trip loaded with its relations."""
    response = TripResponse.model_validate(trip)
    response.driver = summarize_driver(trip.driver)
    return response
