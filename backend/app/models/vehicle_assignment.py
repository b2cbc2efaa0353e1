"""
Vehicle Assignment database model.

Links a vehicle to the driver currently using it. Past links are kept
with is_active = False for history.
"""

from sqlalchemy import Column, Integer, Boolean, ForeignKey, DateTime, Index, text
from sqlalchemy.orm import relationship
from backend.app.db.session import Base, utcnow


class VehicleAssignment(Base):
    """
    Vehicle Assignment model.

    Only one active assignment per vehicle, enforced by a partial unique index.
    """
    __tablename__ = "vehicle_assignments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    vehicle_id = Column(Integer, ForeignKey('vehicles.id'), nullable=False, index=True)
    driver_id = Column(Integer, ForeignKey('drivers.id'), nullable=False, index=True)
    assigned_by_user_id = Column(Integer, ForeignKey('users.id'), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    assigned_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    unassigned_at = Column(DateTime(timezone=True), nullable=True)

    driver = relationship("Driver", lazy="raise")

    __table_args__ = (
        Index('ix_vehicle_assignments_active', 'vehicle_id', unique=True,
              postgresql_where=text("is_active"), sqlite_where=text("is_active = 1")),
    )

    def __repr__(self):
        return f"<VehicleAssignment(vehicle_id={self.vehicle_id}, driver_id={self.driver_id}, active={self.is_active})>"
