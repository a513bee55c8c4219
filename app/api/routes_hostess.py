"""
Hostess API routes - arrival check-in at the venue, keyed by the event's public code
"""

from typing import Optional
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.guest import ArrivalRequest, GuestTableChange
from app.services.checkin_service import CheckInService
from app.services.errors import SeatingError
from app.services.repositories import EventRepo
from app.utils.security import rate_limit_check, get_client_ip
from app.utils.responses import success_response, error_response, rate_limit_error, seating_error_response

router = APIRouter()

EVENT_NOT_FOUND = "Event not found. Please check the event code."

def resolve_event_id(request: Request, public_code: str, db: Session) -> Optional[int]:
    """Rate-limit the caller and map the public code to an event id"""
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        raise rate_limit_error()

    event = EventRepo.get_by_public_code(db, public_code)
    if not event:
        return None
    return event.id

@router.get("/{public_code}")
async def hostess_view(request: Request, public_code: str, db: Session = Depends(get_db)):
    """Accepted guests with their tables and arrival status"""
    event_id = resolve_event_id(request, public_code, db)
    if event_id is None:
        return error_response(message=EVENT_NOT_FOUND, status_code=404)

    try:
        data = CheckInService.get_hostess_data(event_id, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Hostess data retrieved", data=data)

@router.post("/{public_code}/arrivals")
async def mark_arrived(
    request: Request,
    public_code: str,
    arrival: ArrivalRequest,
    db: Session = Depends(get_db)
):
    """Mark a guest as arrived"""
    event_id = resolve_event_id(request, public_code, db)
    if event_id is None:
        return error_response(message=EVENT_NOT_FOUND, status_code=404)

    try:
        result = CheckInService.mark_guest_arrived(event_id, arrival.guest_id, db, table_id=arrival.table_id)
    except SeatingError as exc:
        return seating_error_response(exc)

    message = "Guest marked as arrived" if not result["was_already_arrived"] else "Guest had already arrived"
    return success_response(message=message, data=result)

@router.delete("/{public_code}/arrivals/{guest_id}")
async def unmark_arrived(request: Request, public_code: str, guest_id: int, db: Session = Depends(get_db)):
    """Undo a guest's arrival"""
    event_id = resolve_event_id(request, public_code, db)
    if event_id is None:
        return error_response(message=EVENT_NOT_FOUND, status_code=404)

    try:
        CheckInService.unmark_guest_arrived(event_id, guest_id, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message="Guest arrival cleared")

@router.put("/{public_code}/guests/{guest_id}/table")
async def change_table(
    request: Request,
    public_code: str,
    guest_id: int,
    change: GuestTableChange,
    db: Session = Depends(get_db)
):
    """Move a guest to another table during the event"""
    event_id = resolve_event_id(request, public_code, db)
    if event_id is None:
        return error_response(message=EVENT_NOT_FOUND, status_code=404)

    try:
        table_name = CheckInService.update_guest_table(event_id, guest_id, change.table_id, db)
    except SeatingError as exc:
        return seating_error_response(exc)
    return success_response(message=f"Guest moved to {table_name}", data={"table_name": table_name})
