"""
Hostess check-in: arrival tracking and on-the-day table changes
"""

import logging
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy.orm import Session, joinedload

from app.models import Event, Guest, Rsvp, SeatingTable, TableAssignment
from app.services.errors import NotFoundError, SeatingError
from app.services.guest_selection import RsvpStatus
from app.services.repositories import EventRepo, GuestRepo, TableRepo
from app.services.seating_service import SeatingService

logger = logging.getLogger(__name__)

def party_size(guest: Guest) -> int:
    """People expected at the door for an accepted guest"""
    return (guest.rsvp.guest_count if guest.rsvp else 0) or 1

class CheckInService:
    """Service for hostess check-ins on the day of the event"""

    @staticmethod
    def _require_active(event: Optional[Event]) -> Event:
        if event is None:
            raise NotFoundError("Event not found")
        if not event.is_active:
            raise SeatingError("Event is not active")
        return event

    @staticmethod
    def _guest_in_active_event(db: Session, guest_id: int, event_id: int) -> Guest:
        guest = GuestRepo.require(db, guest_id, event_id=event_id)
        CheckInService._require_active(guest.event)
        return guest

    @staticmethod
    def get_hostess_data(event_id: int, db: Session) -> Dict:
        """Accepted guests, tables and arrival counts for the hostess view"""
        event = CheckInService._require_active(EventRepo.get_by_id(db, event_id))

        tables = (
            db.query(SeatingTable)
            .options(joinedload(SeatingTable.assignments).joinedload(TableAssignment.guest).joinedload(Guest.rsvp))
            .filter(SeatingTable.event_id == event_id)
            .order_by(SeatingTable.name)
            .all()
        )
        guests = (
            db.query(Guest)
            .join(Rsvp)
            .options(joinedload(Guest.rsvp), joinedload(Guest.table_assignment).joinedload(TableAssignment.table))
            .filter(Guest.event_id == event_id, Rsvp.status == RsvpStatus.ACCEPTED.value)
            .order_by(Guest.name)
            .all()
        )

        guest_rows = []
        for guest in guests:
            table = guest.table_assignment.table if guest.table_assignment else None
            guest_rows.append({
                "id": guest.id,
                "name": guest.name,
                "guest_count": party_size(guest),
                "side": guest.side,
                "group_name": guest.group_name,
                "table_id": table.id if table else None,
                "table_name": table.name if table else None,
                "arrived_at": guest.arrived_at,
                "arrived_table_id": guest.arrived_table_id,
                "is_arrived": guest.arrived_at is not None,
            })

        table_rows = []
        for table in tables:
            seated = [assignment.guest for assignment in table.assignments]
            arrived = [guest for guest in seated if guest.arrived_at is not None]
            seats_used = sum(party_size(guest) for guest in seated)
            table_rows.append({
                "id": table.id,
                "name": table.name,
                "capacity": table.capacity,
                "seats_used": seats_used,
                "seats_available": table.capacity - seats_used,
                "guest_count": len(seated),
                "arrived_count": len(arrived),
                "arrived_people_count": sum(party_size(guest) for guest in arrived),
                "is_full": seats_used >= table.capacity,
                "guests": [
                    {
                        "id": guest.id,
                        "name": guest.name,
                        "guest_count": party_size(guest),
                        "side": guest.side,
                        "group_name": guest.group_name,
                        "arrived_at": guest.arrived_at,
                        "is_arrived": guest.arrived_at is not None,
                    }
                    for guest in seated
                ],
            })

        return {
            "event": {"id": event.id, "name": event.name, "date": event.date},
            "guests": guest_rows,
            "tables": table_rows,
            "stats": {
                "total_guests": len(guests),
                "arrived_guests": sum(1 for guest in guests if guest.arrived_at is not None),
                "total_expected": sum(party_size(guest) for guest in guests),
                "tables_count": len(tables),
            },
        }

    @staticmethod
    def mark_guest_arrived(event_id: int, guest_id: int, db: Session, table_id: Optional[int] = None) -> Dict:
        """Record a guest's arrival, at ``table_id`` or else at their assigned table"""
        guest = CheckInService._guest_in_active_event(db, guest_id, event_id)
        if table_id is not None:
            TableRepo.require_in_event(db, table_id, event_id)
        elif guest.table_assignment is not None:
            table_id = guest.table_assignment.table_id

        was_already_arrived = guest.arrived_at is not None
        guest.arrived_at = datetime.utcnow()
        guest.arrived_table_id = table_id
        db.commit()
        db.refresh(guest)
        logger.info("Guest %s arrived at event %s (table %s)", guest.id, event_id, table_id)

        return {
            "guest_id": guest.id,
            "name": guest.name,
            "arrived_at": guest.arrived_at,
            "arrived_table_id": guest.arrived_table_id,
            "was_already_arrived": was_already_arrived,
        }

    @staticmethod
    def unmark_guest_arrived(event_id: int, guest_id: int, db: Session) -> None:
        guest = CheckInService._guest_in_active_event(db, guest_id, event_id)
        guest.arrived_at = None
        guest.arrived_table_id = None
        db.commit()

    @staticmethod
    def update_guest_table(event_id: int, guest_id: int, table_id: int, db: Session) -> str:
        """Move a guest to another table from the hostess view; returns the table name"""
        guest = CheckInService._guest_in_active_event(db, guest_id, event_id)
        table = TableRepo.require_in_event(db, table_id, event_id)

        SeatingService._unassign(db, [guest.id])
        db.add(TableAssignment(table_id=table.id, guest_id=guest.id))
        if guest.arrived_at is not None:
            guest.arrived_table_id = table.id
        db.commit()
        return table.name
