"""
Maintenance Record database model.
"""

from sqlalchemy import Column, Integer, Float, String, Text, Date, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from backend.app.db.session import Base, utcnow
from backend.app.models.enums import MaintenanceType


class MaintenanceRecord(Base):
    """Service history entry for a vehicle."""
    __tablename__ = "maintenance_records"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey('vehicles.id'), nullable=False, index=True)

    type = Column(Enum(MaintenanceType), nullable=False)
    scheduled_date = Column(Date, nullable=False, index=True)
    completed_date = Column(Date, nullable=True)
    next_due_date = Column(Date, nullable=True)
    cost = Column(Float, default=0.0, nullable=False)
    description = Column(String(255), nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    vehicle = relationship("Vehicle", lazy="raise")

    def __repr__(self):
        return f"<MaintenanceRecord(id={self.id}, vehicle_id={self.vehicle_id}, type='{self.type.value}')>"
