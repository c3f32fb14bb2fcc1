from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class SchoolUpdate(BaseModel):
    """Profile edit. Only fields that are sent are changed."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = Field(None, min_length=1)
    mobile: Optional[str] = Field(None, pattern=r"^\d{10}$")
    email: Optional[EmailStr] = None


class SchoolResponse(BaseModel):
    udise: str
    name: str
    address: str
    mobile: Optional[str] = None
    email: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SchoolPublicInfo(BaseModel):
    """Public-facing details returned by the UDISE lookup (used before signup)."""

    udise: str
    name: str
    address: str

    class Config:
        from_attributes = True
