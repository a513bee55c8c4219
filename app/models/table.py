"""
Seating table, seat and assignment models
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.db import Base

class SeatingTable(Base):
    __tablename__ = "tables"
    
    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False, default=10)
    shape = Column(String(20), nullable=False, default="circle")  # circle, rectangle, square, oval
    seating_arrangement = Column(String(20), nullable=False, default="even")
    width = Column(Integer, nullable=False, default=120)
    height = Column(Integer, nullable=False, default=120)
    position_x = Column(Integer, nullable=True)
    position_y = Column(Integer, nullable=True)
    rotation = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    
    # Relationships
    event = relationship("Event", back_populates="tables")
    seats = relationship(
        "Seat", back_populates="table", cascade="all, delete-orphan", order_by="Seat.seat_number"
    )
    assignments = relationship("TableAssignment", back_populates="table", cascade="all, delete-orphan")

class Seat(Base):
    __tablename__ = "seats"

    id = Column(Integer, primary_key=True, index=True)
    table_id = Column(Integer, ForeignKey("tables.id"), nullable=False, index=True)
    seat_number = Column(Integer, nullable=False)
    relative_x = Column(Float, nullable=False)
    relative_y = Column(Float, nullable=False)
    angle = Column(Float, nullable=False)
    side = Column(String(20), nullable=True)
    guest_id = Column(Integer, ForeignKey("guests.id", ondelete="SET NULL"), nullable=True)

    table = relationship("SeatingTable", back_populates="seats")
    guest = relationship("Guest")

    __table_args__ = (UniqueConstraint("table_id", "seat_number", name="uq_seat_table_number"),)

class TableAssignment(Base):
    __tablename__ = "table_assignments"

    id = Column(Integer, primary_key=True, index=True)
    table_id = Column(Integer, ForeignKey("tables.id"), nullable=False, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False, unique=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    table = relationship("SeatingTable", back_populates="assignments")
    guest = relationship("Guest", back_populates="table_assignment")
