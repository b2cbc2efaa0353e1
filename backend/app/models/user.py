"""
User database model.

This module defines the User SQLAlchemy model for authentication.
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum
from backend.app.db.session import Base, utcnow
from backend.app.models.enums import UserRole, UserStatus


class User(Base):
    """
    User model for authentication and user management.

    Email is stored lower-cased so the unique constraint is case-insensitive.
    Users are never hard-deleted: deletion sets status INACTIVE and deleted_at.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(150), nullable=False)
    phone = Column(String(50), nullable=False, default="")
    department = Column(String(100), nullable=True)

    role = Column(Enum(UserRole), default=UserRole.DRIVER, nullable=False, index=True)
    status = Column(Enum(UserStatus), default=UserStatus.ACTIVE, nullable=False, index=True)

    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
