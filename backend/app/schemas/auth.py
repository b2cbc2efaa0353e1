"""
Authentication Pydantic schemas.

Defines request and response schemas for authentication actions.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from backend.app.models.enums import UserRole, UserStatus
from backend.app.schemas.common import CamelModel


class UserRegister(CamelModel):
    """
    Schema for self-registration.

    Self-registered accounts are always ACTIVE drivers.
    """
    email: EmailStr = Field(..., description="User email address")
    name: str = Field(..., min_length=1, max_length=150, description="Full name")
    phone: str = Field(default="", max_length=50)
    password: str = Field(..., description="Password")
    confirm_password: str = Field(..., description="Must match password")


class UserLogin(CamelModel):
    """Schema for login by email and password."""
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Password")


class PasswordChange(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str
    confirm_password: str


class PasswordReset(CamelModel):
    """Admin-initiated reset of another user's password."""
    new_password: str


class TokenResponse(CamelModel):
    """
    Schema for JWT token response.

    Returned by successful login/register operations.
    """
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user_id: int = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    name: str
    role: UserRole = Field(..., description="User role")


class UserResponse(CamelModel):
    """
    Schema for user information response.

    Used for the current profile and by the user administration screens.
    """
    id: int
    email: str
    name: str
    phone: str
    department: Optional[str] = None
    role: UserRole
    status: UserStatus
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
