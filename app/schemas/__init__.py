"""
Pydantic schemas package
"""

from .common import *
from .event import *
from .guest import *
from .seating import *
from .venue import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "Pagination",
    "EventCreate",
    "EventResponse",
    "EventDetail",
    "EventStatusUpdate",
    "SeatingInfo",
    "GuestCreate",
    "GuestUpdate",
    "GuestResponse",
    "RsvpUpdate",
    "RsvpResponse",
    "LookupRequest",
    "ArrivalRequest",
    "GuestTableChange",
    "TableCreate",
    "TableUpdate",
    "TablePositionUpdate",
    "AssignGuestsRequest",
    "MoveGuestRequest",
    "SeatAssignRequest",
    "GuestFilterIn",
    "AutoArrangeRequest",
    "TableConfigIn",
    "AutoArrangeConfigsRequest",
    "AutoArrangeResult",
    "VenueBlockType",
    "ColorTheme",
    "VenueBlockCreate",
    "VenueBlockUpdate",
    "VenueBlockPositionUpdate",
    "VenueBlockSizeUpdate",
    "VenueBlockRotationUpdate",
    "VenueBlockResponse",
]
