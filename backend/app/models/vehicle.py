"""
Vehicle database model.

Vehicles are rented fleet units identified by plate and VIN.
"""

from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Enum, Index, text
from sqlalchemy.orm import relationship
from backend.app.db.session import Base, utcnow
from backend.app.models.enums import VehicleStatus

LIVE_ROWS = text("deleted_at IS NULL")


class Vehicle(Base):
    """
    Vehicle model.

    Plate and VIN are unique among live vehicles only, so a plate that
    belonged to a soft-deleted vehicle can be registered again.
    """
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Identification
    model = Column(String(100), nullable=False)
    plate = Column(String(50), nullable=False)
    vin = Column(String(50), nullable=False)
    registration_expiry = Column(Date, nullable=True)

    # Capacity and cost
    capacity = Column(Integer, nullable=False)
    monthly_rent = Column(Float, nullable=False)
    salik = Column(Float, default=0.0, nullable=False)  # road toll balance
    owner = Column(String(150), nullable=True)
    km_usage = Column(Float, default=0.0, nullable=False)

    status = Column(Enum(VehicleStatus), default=VehicleStatus.AVAILABLE, nullable=False, index=True)
    last_maintenance = Column(Date, nullable=True)
    next_maintenance_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    active_assignments = relationship(
        "VehicleAssignment",
        primaryjoin="and_(Vehicle.id == VehicleAssignment.vehicle_id, VehicleAssignment.is_active.is_(True))",
        viewonly=True,
        lazy="raise",
    )

    __table_args__ = (
        Index('ix_vehicles_live_plate', 'plate', unique=True,
              postgresql_where=LIVE_ROWS, sqlite_where=LIVE_ROWS),
        Index('ix_vehicles_live_vin', 'vin', unique=True,
              postgresql_where=LIVE_ROWS, sqlite_where=LIVE_ROWS),
    )

    @property
    def active_assignment(self):
        return self.active_assignments[0] if self.active_assignments else None

    def __repr__(self):
        return f"<Vehicle(id={self.id}, plate='{self.plate}', status='{self.status.value}')>"
