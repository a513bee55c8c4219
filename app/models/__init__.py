"""
Database models package
"""

from .event import Event
from .guest import Guest, Rsvp
from .table import SeatingTable, Seat, TableAssignment
from .venue import VenueBlock

__all__ = ["Event", "Guest", "Rsvp", "SeatingTable", "Seat", "TableAssignment", "VenueBlock"]
