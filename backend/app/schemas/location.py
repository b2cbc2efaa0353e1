"""
Agency and hotel schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from backend.app.schemas.common import CamelModel


class AgencyCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=150, description="Unique (case-insensitive) among live agencies")
    contact_person: str = Field(..., min_length=1, max_length=150)
    phone: str = Field(..., min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)


class AgencyUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    contact_person: Optional[str] = Field(None, min_length=1, max_length=150)
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)


class AgencyResponse(CamelModel):
    id: int
    name: str
    contact_person: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class HotelCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=150, description="Unique (case-insensitive) among live hotels")
    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=50)
    email: Optional[EmailStr] = None


class HotelUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None


class HotelResponse(CamelModel):
    id: int
    name: str
    address: str
    city: str
    phone: str
    email: Optional[str] = None
    created_at: datetime
    updated_at: datetime
