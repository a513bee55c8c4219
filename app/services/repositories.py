"""
Repository layer for events, guests and tables.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from app.models import Event, Guest, Rsvp, SeatingTable, TableAssignment, VenueBlock
from app.services.errors import NotFoundError


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def get_by_public_code(db: Session, public_code: str) -> Optional[Event]:
        return db.query(Event).filter(Event.public_code == public_code).first()

    @staticmethod
    def get_by_id(db: Session, event_id: int) -> Optional[Event]:
        return db.query(Event).filter(Event.id == event_id).first()

    @staticmethod
    def require(db: Session, event_id: int) -> Event:
        event = EventRepo.get_by_id(db, event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    @staticmethod
    def create(db: Session, name: str, date: datetime, organizer_email: str, public_code: str) -> Event:
        event = Event(name=name, date=date, organizer_email=organizer_email, public_code=public_code)
        db.add(event)
        db.commit()
        db.refresh(event)
        return event


# -------- Guest repository --------

class GuestRepo:
    @staticmethod
    def list_for_event(db: Session, event_id: int) -> List[Guest]:
        return (
            db.query(Guest)
            .options(joinedload(Guest.rsvp), joinedload(Guest.table_assignment))
            .filter(Guest.event_id == event_id)
            .order_by(Guest.id)
            .all()
        )

    @staticmethod
    def list_by_ids(db: Session, event_id: int, guest_ids: Iterable[int]) -> List[Guest]:
        return (
            db.query(Guest)
            .options(joinedload(Guest.rsvp))
            .filter(Guest.event_id == event_id, Guest.id.in_(list(guest_ids)))
            .all()
        )

    @staticmethod
    def get(db: Session, guest_id: int) -> Optional[Guest]:
        return db.query(Guest).options(joinedload(Guest.rsvp)).filter(Guest.id == guest_id).first()

    @staticmethod
    def require(db: Session, guest_id: int, event_id: Optional[int] = None) -> Guest:
        guest = GuestRepo.get(db, guest_id)
        if not guest or (event_id is not None and guest.event_id != event_id):
            raise NotFoundError("Guest not found")
        return guest

    @staticmethod
    def find_by_name(db: Session, event_id: int, name_icontains: str) -> Optional[Guest]:
        return db.query(Guest).filter(
            Guest.event_id == event_id,
            func.lower(Guest.name).like(f"%{name_icontains.lower()}%")
        ).first()

    @staticmethod
    def set_rsvp(db: Session, guest: Guest, status: str, guest_count: int) -> Rsvp:
        if guest.rsvp is None:
            guest.rsvp = Rsvp(status=status, guest_count=guest_count)
        else:
            guest.rsvp.status = status
            guest.rsvp.guest_count = guest_count
        guest.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(guest)
        return guest.rsvp


# -------- Table repository --------

class TableRepo:
    @staticmethod
    def list_for_event(db: Session, event_id: int) -> List[SeatingTable]:
        return (
            db.query(SeatingTable)
            .options(
                selectinload(SeatingTable.seats),
                selectinload(SeatingTable.assignments)
                .joinedload(TableAssignment.guest)
                .joinedload(Guest.rsvp),
            )
            .filter(SeatingTable.event_id == event_id)
            .order_by(SeatingTable.id)
            .all()
        )

    @staticmethod
    def require(db: Session, table_id: int) -> SeatingTable:
        table = db.query(SeatingTable).filter(SeatingTable.id == table_id).first()
        if not table:
            raise NotFoundError("Table not found")
        return table

    @staticmethod
    def count_for_event(db: Session, event_id: int) -> int:
        return db.query(func.count(SeatingTable.id)).filter(SeatingTable.event_id == event_id).scalar()

    @staticmethod
    def assigned_guest_ids(db: Session, event_id: int) -> set[int]:
        rows = (
            db.query(TableAssignment.guest_id)
            .join(SeatingTable, TableAssignment.table_id == SeatingTable.id)
            .filter(SeatingTable.event_id == event_id)
            .all()
        )
        return {row.guest_id for row in rows}

    @staticmethod
    def require_in_event(db: Session, table_id: int, event_id: int) -> SeatingTable:
        table = TableRepo.require(db, table_id)
        if table.event_id != event_id:
            raise NotFoundError("Table not found")
        return table


# -------- Venue block repository --------

class VenueBlockRepo:
    @staticmethod
    def list_for_event(db: Session, event_id: int) -> List[VenueBlock]:
        return (
            db.query(VenueBlock)
            .filter(VenueBlock.event_id == event_id)
            .order_by(VenueBlock.created_at, VenueBlock.id)
            .all()
        )

    @staticmethod
    def require(db: Session, block_id: int) -> VenueBlock:
        block = db.query(VenueBlock).filter(VenueBlock.id == block_id).first()
        if not block:
            raise NotFoundError("Block not found")
        return block
