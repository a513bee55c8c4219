"""
Guest-related Pydantic schemas
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from app.services.guest_selection import RsvpStatus

class GuestCreate(BaseModel):
    """Schema for creating a guest"""
    name: str = Field(..., min_length=1, max_length=255)
    side: Optional[str] = None
    group_name: Optional[str] = None
    expected_guests: int = Field(1, ge=1)
    phone_number: Optional[str] = None

class GuestUpdate(BaseModel):
    """Schema for updating a guest"""
    name: Optional[str] = None
    side: Optional[str] = None
    group_name: Optional[str] = None
    expected_guests: Optional[int] = Field(None, ge=1)
    phone_number: Optional[str] = None

class RsvpUpdate(BaseModel):
    """Schema for recording a guest's RSVP"""
    status: RsvpStatus
    guest_count: int = Field(0, ge=0)

class RsvpResponse(BaseModel):
    status: RsvpStatus
    guest_count: int

    model_config = ConfigDict(from_attributes=True)

class GuestResponse(BaseModel):
    """Guest response schema"""
    id: int
    name: str
    side: Optional[str] = None
    group_name: Optional[str] = None
    expected_guests: int
    phone_number: Optional[str] = None
    rsvp: Optional[RsvpResponse] = None

    model_config = ConfigDict(from_attributes=True)

class LookupRequest(BaseModel):
    """Guest lookup request"""
    public_code: str
    name: str

class ArrivalRequest(BaseModel):
    """Hostess marks a guest as arrived; table_id defaults to the guest's assigned table"""
    guest_id: int
    table_id: Optional[int] = None

class GuestTableChange(BaseModel):
    table_id: int
