"""
Event-related Pydantic schemas
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, EmailStr

class EventCreate(BaseModel):
    """Schema for creating an event"""
    name: str
    date: datetime
    organizer_email: EmailStr

class EventResponse(BaseModel):
    """Basic event response"""
    id: int
    name: str
    date: datetime
    organizer_email: str
    public_code: str
    is_active: bool = True
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class EventStatusUpdate(BaseModel):
    """Open or close the event for hostess check-in"""
    is_active: bool

class EventDetail(EventResponse):
    """Detailed event response with counts"""
    total_guests: int
    total_tables: int
    seated_guests: int

class SeatingInfo(BaseModel):
    """Seating information for a guest"""
    guest_name: str
    table_name: Optional[str] = None
    seat_no: Optional[int] = None
    table_mates: List[dict]  # List of {name, seat_no}
