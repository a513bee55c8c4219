"""
Seating arrangement service: tables, seats and guest assignments
"""

import logging
from typing import Dict, List, Mapping, Optional, Tuple

from sqlalchemy.orm import Session

from app.models import Guest, Seat, SeatingTable, TableAssignment
from app.schemas.event import SeatingInfo
from app.schemas.seating import TableCreate, TablePositionUpdate, TableUpdate
from app.services.errors import NotFoundError, SeatingError
from app.services.guest_selection import GuestRecord, RsvpStatus
from app.services.repositories import EventRepo, GuestRepo, TableRepo
from app.services.seat_geometry import calculate_seat_positions, rebind_seats, seat_relative_to_absolute

logger = logging.getLogger(__name__)

GEOMETRY_FIELDS = ("capacity", "shape", "seating_arrangement", "width", "height")

def seats_needed(guest: Guest) -> int:
    return GuestRecord.from_model(guest).seats_needed

def build_seats(
    capacity: int,
    shape: str,
    arrangement: str,
    width: Optional[int],
    height: Optional[int],
    previous: Optional[Mapping[int, Optional[int]]] = None,
) -> Tuple[List[Seat], List[int]]:
    """Seat rows for a table layout, keeping guests on seat numbers that still exist"""
    positions = calculate_seat_positions(capacity, shape, arrangement, width, height)
    bound, dropped = rebind_seats(previous or {}, positions)
    seats = [
        Seat(
            seat_number=position.seat_number,
            relative_x=position.relative_x,
            relative_y=position.relative_y,
            angle=position.angle,
            side=position.side,
            guest_id=guest_id,
        )
        for position, guest_id in bound
    ]
    return seats, dropped

def guest_to_dict(guest: Guest) -> Dict:
    return {
        "id": guest.id,
        "name": guest.name,
        "side": guest.side,
        "group_name": guest.group_name,
        "expected_guests": guest.expected_guests,
        "rsvp_status": guest.rsvp.status if guest.rsvp else None,
        "seats_needed": seats_needed(guest),
        "table_id": guest.table_assignment.table_id if guest.table_assignment else None,
    }

def table_to_dict(table: SeatingTable) -> Dict:
    guests = [assignment.guest for assignment in table.assignments]
    seats_used = sum(seats_needed(guest) for guest in guests)
    return {
        "id": table.id,
        "name": table.name,
        "capacity": table.capacity,
        "shape": table.shape,
        "seating_arrangement": table.seating_arrangement,
        "width": table.width,
        "height": table.height,
        "position_x": table.position_x,
        "position_y": table.position_y,
        "rotation": table.rotation,
        "seats_used": seats_used,
        "capacity_warning": seats_used > table.capacity,
        "guests": [
            {"id": guest.id, "name": guest.name, "seats_needed": seats_needed(guest)}
            for guest in sorted(guests, key=lambda g: g.name)
        ],
        "seats": [seat_to_dict(seat, table) for seat in table.seats],
    }

def seat_to_dict(seat: Seat, table: SeatingTable) -> Dict:
    """Seat data; ``x``/``y`` are canvas coordinates once the table has been placed"""
    data = {
        "seat_number": seat.seat_number,
        "relative_x": seat.relative_x,
        "relative_y": seat.relative_y,
        "angle": seat.angle,
        "side": seat.side,
        "guest_id": seat.guest_id,
        "x": None,
        "y": None,
    }
    if table.position_x is not None and table.position_y is not None:
        data["x"], data["y"] = seat_relative_to_absolute(
            seat.relative_x,
            seat.relative_y,
            table.position_x,
            table.position_y,
            table.width,
            table.height,
            table.rotation or 0,
        )
    return data

class SeatingService:
    """Service for seating arrangement operations"""

    # ---- tables ----

    @staticmethod
    def create_table(event_id: int, data: TableCreate, db: Session) -> SeatingTable:
        EventRepo.require(db, event_id)
        seats, _ = build_seats(data.capacity, data.shape, data.seating_arrangement, data.width, data.height)
        table = SeatingTable(
            event_id=event_id,
            name=data.name,
            capacity=data.capacity,
            shape=data.shape.value,
            seating_arrangement=data.seating_arrangement.value,
            width=data.width,
            height=data.height,
            position_x=data.position_x,
            position_y=data.position_y,
            seats=seats,
        )
        db.add(table)
        db.commit()
        db.refresh(table)
        return table

    @staticmethod
    def update_table(table_id: int, data: TableUpdate, db: Session) -> SeatingTable:
        """Update a table. Any geometry change regenerates every seat."""
        table = TableRepo.require(db, table_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True, mode="json")

        if "name" in changes:
            table.name = changes["name"]

        geometry_changed = any(
            name in changes and changes[name] != getattr(table, name) for name in GEOMETRY_FIELDS
        )
        for name in GEOMETRY_FIELDS:
            if name in changes:
                setattr(table, name, changes[name])

        if geometry_changed:
            previous = {seat.seat_number: seat.guest_id for seat in table.seats}
            table.seats.clear()
            # old seat numbers must be gone before the new rows are inserted
            db.flush()
            seats, dropped = build_seats(
                table.capacity, table.shape, table.seating_arrangement, table.width, table.height, previous
            )
            table.seats.extend(seats)
            if dropped:
                logger.info("Table %s lost seat bindings for guests %s", table.id, dropped)

        db.commit()
        db.refresh(table)
        return table

    @staticmethod
    def update_table_position(table_id: int, data: TablePositionUpdate, db: Session) -> SeatingTable:
        table = TableRepo.require(db, table_id)
        table.position_x = data.position_x
        table.position_y = data.position_y
        if data.rotation is not None:
            table.rotation = data.rotation % 360
        db.commit()
        db.refresh(table)
        return table

    @staticmethod
    def delete_table(table_id: int, db: Session) -> None:
        table = TableRepo.require(db, table_id)
        db.query(Guest).filter(Guest.arrived_table_id == table.id).update(
            {Guest.arrived_table_id: None}, synchronize_session=False
        )
        db.delete(table)
        db.commit()

    @staticmethod
    def get_event_tables(event_id: int, db: Session) -> List[Dict]:
        EventRepo.require(db, event_id)
        return [table_to_dict(table) for table in TableRepo.list_for_event(db, event_id)]

    # ---- assignments ----

    @staticmethod
    def _unassign(db: Session, guest_ids: List[int]) -> int:
        db.query(Seat).filter(Seat.guest_id.in_(guest_ids)).update(
            {Seat.guest_id: None}, synchronize_session=False
        )
        removed = db.query(TableAssignment).filter(TableAssignment.guest_id.in_(guest_ids)).delete(
            synchronize_session=False
        )
        db.flush()
        return removed

    @staticmethod
    def assign_guests_to_table(table_id: int, guest_ids: List[int], db: Session) -> Dict:
        """Assign guests to a table, moving them off any other table.

        Exceeding the table's capacity is allowed and reported as a warning.
        """
        table = TableRepo.require(db, table_id)
        guests = GuestRepo.list_by_ids(db, table.event_id, guest_ids)
        if len(guests) != len(set(guest_ids)):
            raise SeatingError("Some guests not found or don't belong to this event")

        incoming = {guest.id for guest in guests}
        current = sum(
            seats_needed(assignment.guest)
            for assignment in table.assignments
            if assignment.guest_id not in incoming
        )
        new_seats = sum(seats_needed(guest) for guest in guests)

        SeatingService._unassign(db, list(incoming))
        for guest in guests:
            db.add(TableAssignment(table_id=table.id, guest_id=guest.id))
        db.commit()

        return {
            "assigned": len(guests),
            "capacity_warning": current + new_seats > table.capacity,
        }

    @staticmethod
    def remove_guest_from_table(guest_id: int, db: Session) -> None:
        removed = SeatingService._unassign(db, [guest_id])
        if not removed:
            db.rollback()
            raise NotFoundError("Assignment not found")
        db.commit()

    @staticmethod
    def remove_guests_from_tables(guest_ids: List[int], db: Session) -> int:
        if not guest_ids:
            raise SeatingError("No guests provided")
        removed = SeatingService._unassign(db, guest_ids)
        db.commit()
        return removed

    @staticmethod
    def move_guest_to_table(guest_id: int, new_table_id: int, db: Session) -> None:
        table = TableRepo.require(db, new_table_id)
        guest = GuestRepo.require(db, guest_id, event_id=table.event_id)
        SeatingService._unassign(db, [guest.id])
        db.add(TableAssignment(table_id=table.id, guest_id=guest.id))
        db.commit()

    @staticmethod
    def assign_seat(table_id: int, seat_number: int, guest_id: Optional[int], db: Session) -> Seat:
        """Bind a table-assigned guest to a seat, or clear the seat"""
        table = TableRepo.require(db, table_id)
        seat = next((s for s in table.seats if s.seat_number == seat_number), None)
        if seat is None:
            raise NotFoundError("Seat not found")

        if guest_id is not None:
            if not any(a.guest_id == guest_id for a in table.assignments):
                raise SeatingError("Guest is not assigned to this table")
            if seat.guest_id not in (None, guest_id):
                raise SeatingError(f"Seat {seat_number} is already taken")
            for other in table.seats:
                if other.guest_id == guest_id:
                    other.guest_id = None

        seat.guest_id = guest_id
        db.commit()
        db.refresh(seat)
        return seat

    # ---- queries ----

    @staticmethod
    def get_unseated_guests(event_id: int, db: Session) -> List[Dict]:
        EventRepo.require(db, event_id)
        guests = [g for g in GuestRepo.list_for_event(db, event_id) if g.table_assignment is None]
        return [guest_to_dict(guest) for guest in sorted(guests, key=lambda g: g.name)]

    @staticmethod
    def get_seating_stats(event_id: int, db: Session) -> Dict:
        EventRepo.require(db, event_id)
        tables = TableRepo.list_for_event(db, event_id)
        guests = GuestRepo.list_for_event(db, event_id)

        total_capacity = sum(table.capacity for table in tables)
        seated = [g for g in guests if g.table_assignment is not None]
        unseated = [g for g in guests if g.table_assignment is None]
        seated_by_party = sum(seats_needed(g) for g in seated)

        return {
            "total_tables": len(tables),
            "total_capacity": total_capacity,
            "seated_guests_count": len(seated),
            "unseated_guests_count": len(unseated),
            "seated_by_party_size": seated_by_party,
            "unseated_by_party_size": sum(seats_needed(g) for g in unseated),
            "capacity_used": seated_by_party,
            "capacity_remaining": total_capacity - seated_by_party,
        }

    @staticmethod
    def get_guests_for_assignment(
        event_id: int,
        db: Session,
        seated: str = "all",
        side: Optional[str] = None,
        group_name: Optional[str] = None,
        rsvp_status: Optional[RsvpStatus] = None,
        search: Optional[str] = None,
    ) -> List[Dict]:
        """Guests for the assignment picker, filtered by seating state and attributes"""
        EventRepo.require(db, event_id)
        results = []
        for guest in GuestRepo.list_for_event(db, event_id):
            record = GuestRecord.from_model(guest)
            if seated == "seated" and guest.table_assignment is None:
                continue
            if seated == "unseated" and guest.table_assignment is not None:
                continue
            if side and guest.side != side:
                continue
            if group_name and guest.group_name != group_name:
                continue
            if rsvp_status and record.status != rsvp_status:
                continue
            if search and search.lower() not in guest.name.lower():
                continue
            results.append(guest_to_dict(guest))
        return sorted(results, key=lambda g: g["name"])

    @staticmethod
    def get_guest_seating_info(public_code: str, guest_name: str, db: Session) -> Optional[SeatingInfo]:
        """Get seating information for a specific guest"""
        event = EventRepo.get_by_public_code(db, public_code)
        if not event:
            return None

        guest = GuestRepo.find_by_name(db, event.id, guest_name)
        if not guest:
            return None

        assignment = guest.table_assignment
        if assignment is None:
            return SeatingInfo(guest_name=guest.name, table_mates=[])

        table = assignment.table
        seat_by_guest = {seat.guest_id: seat.seat_number for seat in table.seats if seat.guest_id}
        table_mates = [
            {"name": a.guest.name, "seat_no": seat_by_guest.get(a.guest_id)}
            for a in table.assignments
            if a.guest_id != guest.id
        ]

        return SeatingInfo(
            guest_name=guest.name,
            table_name=table.name,
            seat_no=seat_by_guest.get(guest.id),
            table_mates=sorted(table_mates, key=lambda m: m["name"]),
        )
