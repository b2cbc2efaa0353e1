"""
Trip database model.

A trip moves a group of passengers for an agency between a hotel and a destination.
"""

from sqlalchemy import Column, Integer, String, Float, Text, Date, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from backend.app.db.session import Base, utcnow
from backend.app.models.enums import TripStatus, TripType


class Trip(Base):
    """
    Trip model.

    For visibility purposes a trip is owned by its driver: a DRIVER caller
    sees the trip only when driver_id points at their own driver profile.
    """
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Schedule
    trip_date = Column(Date, nullable=False, index=True)
    departure_time = Column(String(5), nullable=False)  # HH:MM
    estimated_arrival_time = Column(String(5), nullable=True)
    actual_arrival_time = Column(String(5), nullable=True)

    # Route
    pickup_location = Column(String(255), nullable=False)
    dropoff_location = Column(String(255), nullable=True)
    destination = Column(String(255), nullable=False)
    type = Column(Enum(TripType), default=TripType.OUT, nullable=False)

    status = Column(Enum(TripStatus), default=TripStatus.SCHEDULED, nullable=False, index=True)

    # Load and distance
    passengers_count = Column(Integer, nullable=False)
    km_start = Column(Float, nullable=False)
    km_end = Column(Float, nullable=True)
    distance_travelled = Column(Float, nullable=True)

    # Money
    trip_price = Column(Float, nullable=True)
    actual_cost = Column(Float, nullable=True)

    notes = Column(Text, nullable=True)

    # References
    driver_id = Column(Integer, ForeignKey('drivers.id'), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey('vehicles.id'), nullable=False, index=True)
    agency_id = Column(Integer, ForeignKey('agencies.id'), nullable=False, index=True)
    hotel_id = Column(Integer, ForeignKey('hotels.id'), nullable=False, index=True)
    created_by_user_id = Column(Integer, ForeignKey('users.id'), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    # Relations resolve soft-deleted rows too, so history stays readable
    driver = relationship("Driver", lazy="raise")
    vehicle = relationship("Vehicle", lazy="raise")
    agency = relationship("Agency", lazy="raise")
    hotel = relationship("Hotel", lazy="raise")

    def __repr__(self):
        return f"<Trip(id={self.id}, trip_date={self.trip_date}, status='{self.status.value}')>"
