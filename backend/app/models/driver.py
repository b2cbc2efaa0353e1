"""
Driver database model.

A driver profile belongs to exactly one user with role DRIVER.
"""

from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Enum, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from backend.app.db.session import Base, utcnow
from backend.app.models.enums import DriverStatus

LIVE_ROWS = text("deleted_at IS NULL")


class Driver(Base):
    """
    Driver profile model.

    At most one live (not soft-deleted) driver per user and one live
    driver per license number, enforced by partial unique indexes.
    """
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Ownership - Driver profile belongs to a User
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)

    status = Column(Enum(DriverStatus), default=DriverStatus.AVAILABLE, nullable=False, index=True)
    license_number = Column(String(100), nullable=False)
    license_expiry = Column(Date, nullable=False)

    # Performance counters
    rating = Column(Float, default=0.0, nullable=False)
    total_trips = Column(Integer, default=0, nullable=False)
    total_km = Column(Float, default=0.0, nullable=False)
    average_rating = Column(Float, default=0.0, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    user = relationship("User", lazy="raise")

    __table_args__ = (
        Index('ix_drivers_live_user', 'user_id', unique=True,
              postgresql_where=LIVE_ROWS, sqlite_where=LIVE_ROWS),
        Index('ix_drivers_live_license', 'license_number', unique=True,
              postgresql_where=LIVE_ROWS, sqlite_where=LIVE_ROWS),
    )

    def __repr__(self):
        return f"<Driver(id={self.id}, user_id={self.user_id}, license='{self.license_number}')>"
