"""
Seating API routes - tables, assignments, auto-arrange and venue blocks (requires authentication)
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.seating import (
    AssignGuestsRequest,
    AutoArrangeConfigsRequest,
    AutoArrangeRequest,
    AutoArrangeResult,
    MoveGuestRequest,
    SeatAssignRequest,
    TableCreate,
    TablePositionUpdate,
    TableUpdate,
)
from app.schemas.venue import (
    VenueBlockCreate,
    VenueBlockPositionUpdate,
    VenueBlockResponse,
    VenueBlockRotationUpdate,
    VenueBlockSizeUpdate,
    VenueBlockUpdate,
)
from app.services.auto_arrange_service import AutoArrangeService
from app.services.errors import SeatingError
from app.services.guest_selection import RsvpStatus
from app.services.seating_service import SeatingService, table_to_dict
from app.services.venue_service import VenueService
from app.utils.security import verify_admin_token
from app.utils.responses import success_response, seating_error_response

router = APIRouter(dependencies=[Depends(verify_admin_token)])

def arrange_message(result: AutoArrangeResult) -> str:
    message = f"Created {result.tables_created} tables and seated {result.guests_seated} guests"
    if result.remaining_unseated:
        message += f". {result.remaining_unseated} guests could not be seated and remain unassigned"
    return message

# ---- tables ----

@router.get("/events/{event_id}/tables")
async def list_tables(event_id: int, db: Session = Depends(get_db)):
    """List tables with their seats and assigned guests"""
    try:
        tables = SeatingService.get_event_tables(event_id, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Tables retrieved", data={"tables": tables})

@router.post("/events/{event_id}/tables")
async def create_table(event_id: int, table_data: TableCreate, db: Session = Depends(get_db)):
    """Create a table and its seat layout"""
    try:
        table = SeatingService.create_table(event_id, table_data, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Table created successfully", data=table_to_dict(table), status_code=201)

@router.patch("/tables/{table_id}")
async def update_table(table_id: int, table_data: TableUpdate, db: Session = Depends(get_db)):
    """Update a table; changing its size or shape regenerates the seats"""
    try:
        table = SeatingService.update_table(table_id, table_data, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Table updated successfully", data=table_to_dict(table))

@router.patch("/tables/{table_id}/position")
async def update_table_position(table_id: int, position: TablePositionUpdate, db: Session = Depends(get_db)):
    """Move or rotate a table on the canvas"""
    try:
        table = SeatingService.update_table_position(table_id, position, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Table position updated", data=table_to_dict(table))

@router.delete("/tables/{table_id}")
async def delete_table(table_id: int, db: Session = Depends(get_db)):
    """Delete a table; its guests become unseated"""
    try:
        SeatingService.delete_table(table_id, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Table deleted successfully")

# ---- assignments ----

@router.post("/tables/{table_id}/guests")
async def assign_guests(table_id: int, request: AssignGuestsRequest, db: Session = Depends(get_db)):
    """Assign guests to a table (moving them from any other table)"""
    try:
        result = SeatingService.assign_guests_to_table(table_id, request.guest_ids, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    message = f"{result['assigned']} guests assigned"
    if result["capacity_warning"]:
        message += ". Table capacity exceeded"
    return success_response(message=message, data=result)

@router.put("/tables/{table_id}/seats/{seat_number}")
async def assign_seat(
    table_id: int,
    seat_number: int,
    request: SeatAssignRequest,
    db: Session = Depends(get_db)
):
    """Bind a guest to a specific seat, or free the seat"""
    try:
        seat = SeatingService.assign_seat(table_id, seat_number, request.guest_id, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(
        message="Seat updated",
        data={"seat_number": seat.seat_number, "guest_id": seat.guest_id}
    )

@router.delete("/guests/{guest_id}/table")
async def remove_guest_from_table(guest_id: int, db: Session = Depends(get_db)):
    """Remove a guest from their table"""
    try:
        SeatingService.remove_guest_from_table(guest_id, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Guest removed from table")

@router.post("/guests/unassign")
async def remove_guests_from_tables(request: AssignGuestsRequest, db: Session = Depends(get_db)):
    """Remove several guests from their tables"""
    try:
        removed = SeatingService.remove_guests_from_tables(request.guest_ids, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message=f"{removed} guests removed from tables", data={"removed": removed})

@router.post("/guests/{guest_id}/move")
async def move_guest(guest_id: int, request: MoveGuestRequest, db: Session = Depends(get_db)):
    """Move a guest to another table"""
    try:
        SeatingService.move_guest_to_table(guest_id, request.new_table_id, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Guest moved")

# ---- queries ----

@router.get("/events/{event_id}/seating/stats")
async def seating_stats(event_id: int, db: Session = Depends(get_db)):
    """Capacity and seated/unseated counts for an event"""
    try:
        stats = SeatingService.get_seating_stats(event_id, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Seating stats retrieved", data=stats)

@router.get("/events/{event_id}/seating/unseated")
async def unseated_guests(event_id: int, db: Session = Depends(get_db)):
    """Guests without a table"""
    try:
        guests = SeatingService.get_unseated_guests(event_id, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Unseated guests retrieved", data={"guests": guests})

@router.get("/events/{event_id}/seating/guests")
async def guests_for_assignment(
    event_id: int,
    seated: str = Query("all", pattern="^(all|seated|unseated)$"),
    side: Optional[str] = Query(None),
    group_name: Optional[str] = Query(None),
    rsvp_status: Optional[RsvpStatus] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Filtered guest list for the assignment picker"""
    try:
        guests = SeatingService.get_guests_for_assignment(
            event_id, db,
            seated=seated,
            side=side,
            group_name=group_name,
            rsvp_status=rsvp_status,
            search=search
        )
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Guests retrieved", data={"guests": guests})

# ---- auto-arrange ----

@router.post("/events/{event_id}/auto-arrange")
async def auto_arrange(event_id: int, request: AutoArrangeRequest, db: Session = Depends(get_db)):
    """Replace all tables with an automatic arrangement of one table size"""
    try:
        summary = AutoArrangeService.auto_arrange_tables(event_id, request, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    result = AutoArrangeResult(**summary.as_dict())
    return success_response(message=arrange_message(result), data=result.model_dump())

@router.post("/events/{event_id}/auto-arrange/configs")
async def auto_arrange_with_configs(
    event_id: int,
    request: AutoArrangeConfigsRequest,
    db: Session = Depends(get_db)
):
    """Arrange guests using several table configurations"""
    try:
        summary = AutoArrangeService.auto_arrange_tables_with_configs(event_id, request, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    result = AutoArrangeResult(**summary.as_dict())
    return success_response(message=arrange_message(result), data=result.model_dump())

# ---- venue blocks ----

def block_to_dict(block) -> dict:
    return VenueBlockResponse.model_validate(block).model_dump(mode="json")

@router.get("/events/{event_id}/venue-blocks")
async def list_venue_blocks(event_id: int, db: Session = Depends(get_db)):
    """Floor plan elements of an event, oldest first"""
    try:
        blocks = VenueService.get_event_blocks(event_id, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Venue blocks retrieved", data={"blocks": [block_to_dict(b) for b in blocks]})

@router.post("/events/{event_id}/venue-blocks")
async def create_venue_block(event_id: int, block_data: VenueBlockCreate, db: Session = Depends(get_db)):
    try:
        block = VenueService.create_block(event_id, block_data, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Venue block created", data=block_to_dict(block), status_code=201)

@router.patch("/venue-blocks/{block_id}")
async def update_venue_block(block_id: int, block_data: VenueBlockUpdate, db: Session = Depends(get_db)):
    try:
        block = VenueService.update_block(block_id, block_data, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Venue block updated", data=block_to_dict(block))

@router.patch("/venue-blocks/{block_id}/position")
async def update_venue_block_position(
    block_id: int,
    position: VenueBlockPositionUpdate,
    db: Session = Depends(get_db)
):
    try:
        block = VenueService.update_block_position(block_id, position, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Venue block position updated", data=block_to_dict(block))

@router.patch("/venue-blocks/{block_id}/size")
async def update_venue_block_size(block_id: int, size: VenueBlockSizeUpdate, db: Session = Depends(get_db)):
    try:
        block = VenueService.update_block_size(block_id, size, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Venue block size updated", data=block_to_dict(block))

@router.patch("/venue-blocks/{block_id}/rotation")
async def update_venue_block_rotation(
    block_id: int,
    rotation: VenueBlockRotationUpdate,
    db: Session = Depends(get_db)
):
    try:
        block = VenueService.update_block_rotation(block_id, rotation, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Venue block rotation updated", data=block_to_dict(block))

@router.delete("/venue-blocks/{block_id}")
async def delete_venue_block(block_id: int, db: Session = Depends(get_db)):
    try:
        VenueService.delete_block(block_id, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Venue block deleted")
