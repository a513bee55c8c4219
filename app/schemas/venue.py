"""
Venue block Pydantic schemas
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from app.services.seat_geometry import TableShape

class VenueBlockType(str, Enum):
    DJ = "dj"
    BAR = "bar"
    STAGE = "stage"
    DANCE_FLOOR = "danceFloor"
    ENTRANCE = "entrance"
    PHOTO_BOOTH = "photoBooth"
    BUFFET = "buffet"
    CAKE = "cake"
    GIFTS = "gifts"
    OTHER = "other"

class ColorTheme(str, Enum):
    DEFAULT = "default"
    BLUE = "blue"
    GREEN = "green"
    PURPLE = "purple"
    PINK = "pink"
    AMBER = "amber"
    ROSE = "rose"

class VenueBlockCreate(BaseModel):
    """Schema for placing a venue element on the floor plan"""
    name: str = Field(..., min_length=1, max_length=100)
    type: VenueBlockType = VenueBlockType.OTHER
    shape: TableShape = TableShape.RECTANGLE
    color_theme: ColorTheme = ColorTheme.DEFAULT
    width: int = Field(200, ge=1)
    height: int = Field(100, ge=1)
    position_x: Optional[int] = None
    position_y: Optional[int] = None

class VenueBlockUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[VenueBlockType] = None
    shape: Optional[TableShape] = None
    color_theme: Optional[ColorTheme] = None

class VenueBlockPositionUpdate(BaseModel):
    position_x: int
    position_y: int

class VenueBlockSizeUpdate(BaseModel):
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)

class VenueBlockRotationUpdate(BaseModel):
    rotation: int

class VenueBlockResponse(BaseModel):
    id: int
    event_id: int
    name: str
    type: VenueBlockType
    shape: TableShape
    color_theme: ColorTheme
    width: int
    height: int
    position_x: Optional[int] = None
    position_y: Optional[int] = None
    rotation: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
