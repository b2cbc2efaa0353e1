"""
Agency and Hotel database models.

Reference data for trips: the agency that books a trip and the hotel it serves.
"""

from sqlalchemy import Column, Integer, String, DateTime, Index, func, text
from backend.app.db.session import Base, utcnow

LIVE_ROWS = text("deleted_at IS NULL")


class Agency(Base):
    """Travel agency booking trips. Name is unique (case-insensitive) among live rows."""
    __tablename__ = "agencies"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    contact_person = Column(String(150), nullable=False)
    phone = Column(String(50), nullable=False)
    email = Column(String(255), nullable=True)
    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    __table_args__ = (
        Index('ix_agencies_live_name', func.lower(name), unique=True,
              postgresql_where=LIVE_ROWS, sqlite_where=LIVE_ROWS),
    )

    def __repr__(self):
        return f"<Agency(id={self.id}, name='{self.name}')>"


class Hotel(Base):
    """Hotel served by trips. Name is unique (case-insensitive) among live rows."""
    __tablename__ = "hotels"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=False)
    email = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    __table_args__ = (
        Index('ix_hotels_live_name', func.lower(name), unique=True,
              postgresql_where=LIVE_ROWS, sqlite_where=LIVE_ROWS),
    )

    def __repr__(self):
        return f"<Hotel(id={self.id}, name='{self.name}')>"
