"""
Venue block model - non-seating floor plan elements (stage, bar, dance floor...)
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.core.db import Base

class VenueBlock(Base):
    __tablename__ = "venue_blocks"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    type = Column(String(30), nullable=False, default="other")  # dj, bar, stage, danceFloor, ...
    shape = Column(String(20), nullable=False, default="rectangle")
    color_theme = Column(String(20), nullable=False, default="default")
    width = Column(Integer, nullable=False, default=200)
    height = Column(Integer, nullable=False, default=100)
    position_x = Column(Integer, nullable=True)
    position_y = Column(Integer, nullable=True)
    rotation = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    event = relationship("Event", back_populates="venue_blocks")
