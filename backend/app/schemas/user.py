"""
User administration schemas.
"""

from typing import Optional

from pydantic import EmailStr, Field

from backend.app.models.enums import UserRole, UserStatus
from backend.app.schemas.common import CamelModel


class UserCreate(CamelModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=150)
    phone: str = Field(default="", max_length=50)
    department: Optional[str] = Field(None, max_length=100)
    password: str
    role: UserRole = UserRole.DRIVER
    status: UserStatus = UserStatus.ACTIVE


class UserUpdate(CamelModel):
    """Partial update; only keys present in the payload are applied."""
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    phone: Optional[str] = Field(None, max_length=50)
    department: Optional[str] = Field(None, max_length=100)
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None


class UserStatusChange(CamelModel):
    status: UserStatus
