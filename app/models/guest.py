"""
Guest and RSVP models
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.core.db import Base

class Guest(Base):
    __tablename__ = "guests"
    
    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    side = Column(String(50), nullable=True)  # bride, groom, both, or free text
    group_name = Column(String(100), nullable=True)
    expected_guests = Column(Integer, nullable=False, default=1)
    phone_number = Column(String(50), nullable=True)
    # set by the hostess when the guest shows up at the venue
    arrived_at = Column(DateTime, nullable=True)
    arrived_table_id = Column(Integer, ForeignKey("tables.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    event = relationship("Event", back_populates="guests")
    rsvp = relationship("Rsvp", back_populates="guest", uselist=False, cascade="all, delete-orphan")
    table_assignment = relationship(
        "TableAssignment", back_populates="guest", uselist=False, cascade="all, delete-orphan"
    )

class Rsvp(Base):
    __tablename__ = "rsvps"

    id = Column(Integer, primary_key=True, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False, unique=True)
    status = Column(String(20), nullable=False, default="PENDING")  # PENDING, ACCEPTED, DECLINED
    guest_count = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    guest = relationship("Guest", back_populates="rsvp")
