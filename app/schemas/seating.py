"""
Seating and auto-arrange Pydantic schemas
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from app.core.config import settings
from app.services.bin_packing import GroupingStrategy
from app.services.guest_selection import DEFAULT_RSVP_STATUSES, RsvpStatus
from app.services.seat_geometry import SeatingArrangement, TableShape

MAX_CAPACITY = settings.MAX_TABLE_CAPACITY

class TableCreate(BaseModel):
    """Schema for creating a table"""
    name: str = Field(..., min_length=1, max_length=100)
    capacity: int = Field(10, ge=1, le=MAX_CAPACITY)
    shape: TableShape = TableShape.CIRCLE
    seating_arrangement: SeatingArrangement = SeatingArrangement.EVEN
    width: int = Field(settings.DEFAULT_TABLE_WIDTH, ge=1)
    height: int = Field(settings.DEFAULT_TABLE_HEIGHT, ge=1)
    position_x: Optional[int] = None
    position_y: Optional[int] = None

class TableUpdate(BaseModel):
    """Schema for updating a table; seat layout is regenerated when geometry changes"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    capacity: Optional[int] = Field(None, ge=1, le=MAX_CAPACITY)
    shape: Optional[TableShape] = None
    seating_arrangement: Optional[SeatingArrangement] = None
    width: Optional[int] = Field(None, ge=1)
    height: Optional[int] = Field(None, ge=1)

class TablePositionUpdate(BaseModel):
    position_x: int
    position_y: int
    rotation: Optional[int] = None

class AssignGuestsRequest(BaseModel):
    guest_ids: List[int] = Field(..., min_length=1)

class MoveGuestRequest(BaseModel):
    new_table_id: int

class SeatAssignRequest(BaseModel):
    """Bind a guest to a seat number, or free the seat with guest_id=None"""
    guest_id: Optional[int] = None

class GuestFilterIn(BaseModel):
    side: Optional[str] = None
    group_name: Optional[str] = None
    rsvp_status: List[RsvpStatus] = Field(default_factory=lambda: sorted(DEFAULT_RSVP_STATUSES))

class AutoArrangeRequest(BaseModel):
    """Single table size for every group"""
    table_size: int = Field(settings.DEFAULT_TABLE_SIZE, ge=1, le=MAX_CAPACITY)
    table_shape: TableShape = TableShape.CIRCLE
    seating_arrangement: SeatingArrangement = SeatingArrangement.EVEN
    grouping_strategy: GroupingStrategy = GroupingStrategy.GROUP_ONLY
    side_filter: Optional[str] = None
    group_filter: Optional[str] = None
    include_rsvp_status: List[RsvpStatus] = Field(default_factory=lambda: sorted(DEFAULT_RSVP_STATUSES))
    width: int = Field(settings.DEFAULT_TABLE_WIDTH, ge=1)
    height: int = Field(settings.DEFAULT_TABLE_HEIGHT, ge=1)

class TableConfigIn(BaseModel):
    shape: TableShape = TableShape.CIRCLE
    capacity: int = Field(10, ge=1, le=MAX_CAPACITY)
    count: int = Field(1, ge=1)
    width: int = Field(settings.DEFAULT_TABLE_WIDTH, ge=1)
    height: int = Field(settings.DEFAULT_TABLE_HEIGHT, ge=1)
    seating_arrangement: SeatingArrangement = SeatingArrangement.EVEN
    group_assignments: Optional[List[str]] = None

class AutoArrangeConfigsRequest(BaseModel):
    """Several table configurations, optionally dedicated to groups"""
    filters: GuestFilterIn = Field(default_factory=GuestFilterIn)
    table_configs: List[TableConfigIn] = Field(..., min_length=1)
    clear_existing: bool = False
    assign_guests: bool = True
    mix_remaining: bool = True

class AutoArrangeResult(BaseModel):
    tables_created: int
    guests_seated: int
    remaining_unseated: int
