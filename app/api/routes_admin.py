"""
Admin API routes - requires authentication
"""

import secrets
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, UploadFile, File, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.db import get_db
from app.models import Guest, Rsvp, SeatingTable, TableAssignment
from app.schemas.common import Pagination
from app.schemas.event import EventCreate, EventDetail, EventResponse, EventStatusUpdate
from app.schemas.guest import GuestCreate, GuestUpdate, GuestResponse, RsvpUpdate
from app.services.excel_service import ExcelService
from app.services.repositories import EventRepo, GuestRepo, TableRepo
from app.services.seating_service import guest_to_dict
from app.utils.security import verify_admin_token
from app.utils.responses import success_response, error_response, not_found_error

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

@router.post("/events", response_model=dict)
async def create_event(
    event_data: EventCreate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Create a new event"""
    # Generate unique public code
    public_code = secrets.token_urlsafe(8)
    while EventRepo.get_by_public_code(db, public_code):
        public_code = secrets.token_urlsafe(8)

    event = EventRepo.create(
        db,
        name=event_data.name,
        date=event_data.date,
        organizer_email=event_data.organizer_email,
        public_code=public_code
    )

    return success_response(
        message="Event created successfully",
        data=EventResponse.model_validate(event).model_dump(mode="json")
    )

@router.get("/events/{event_id}")
async def get_event_details(
    event_id: int,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Get detailed event information"""
    event = EventRepo.get_by_id(db, event_id)
    if not event:
        raise not_found_error("Event")

    total_guests = db.query(Guest).filter(Guest.event_id == event_id).count()
    total_tables = TableRepo.count_for_event(db, event_id)
    seated_guests = db.query(TableAssignment).join(SeatingTable).filter(
        SeatingTable.event_id == event_id
    ).count()

    return success_response(
        message="Event details retrieved",
        data=EventDetail(
            **EventResponse.model_validate(event).model_dump(),
            total_guests=total_guests,
            total_tables=total_tables,
            seated_guests=seated_guests
        ).model_dump(mode="json")
    )

@router.patch("/events/{event_id}/status")
async def update_event_status(
    event_id: int,
    status_data: EventStatusUpdate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Activate or deactivate an event"""
    event = EventRepo.get_by_id(db, event_id)
    if not event:
        raise not_found_error("Event")

    event.is_active = status_data.is_active
    db.commit()
    db.refresh(event)

    return success_response(
        message="Event status updated",
        data=EventResponse.model_validate(event).model_dump(mode="json")
    )

@router.post("/events/{event_id}/guests")
async def create_guest(
    event_id: int,
    guest_data: GuestCreate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Add a guest to an event"""
    if not EventRepo.get_by_id(db, event_id):
        raise not_found_error("Event")

    guest = Guest(event_id=event_id, rsvp=Rsvp(status="PENDING", guest_count=0), **guest_data.model_dump())
    db.add(guest)
    db.commit()
    db.refresh(guest)

    return success_response(
        message="Guest created successfully",
        data=GuestResponse.model_validate(guest).model_dump(mode="json"),
        status_code=201
    )

@router.get("/events/{event_id}/guests")
async def search_guests(
    event_id: int,
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Search and list guests for an event"""
    if not EventRepo.get_by_id(db, event_id):
        raise not_found_error("Event")

    query = db.query(Guest).filter(Guest.event_id == event_id)
    if search:
        query = query.filter(Guest.name.ilike(f"%{search}%"))

    total = query.count()
    offset = (page - 1) * per_page
    guests = query.order_by(Guest.name).offset(offset).limit(per_page).all()

    return success_response(
        message="Guests retrieved successfully",
        data={
            "guests": [guest_to_dict(guest) for guest in guests],
            "pagination": Pagination.of(page, per_page, total).model_dump()
        }
    )

@router.patch("/events/{event_id}/guests/{guest_id}")
async def update_guest(
    event_id: int,
    guest_id: int,
    guest_update: GuestUpdate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Update guest information"""
    guest = GuestRepo.require(db, guest_id, event_id=event_id)

    for field, value in guest_update.model_dump(exclude_unset=True).items():
        setattr(guest, field, value)
    guest.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(guest)

    return success_response(
        message="Guest updated successfully",
        data=guest_to_dict(guest)
    )

@router.put("/events/{event_id}/guests/{guest_id}/rsvp")
async def update_rsvp(
    event_id: int,
    guest_id: int,
    rsvp_data: RsvpUpdate,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Record a guest's RSVP"""
    guest = GuestRepo.require(db, guest_id, event_id=event_id)

    GuestRepo.set_rsvp(db, guest, rsvp_data.status.value, rsvp_data.guest_count)

    return success_response(
        message="RSVP updated successfully",
        data=guest_to_dict(guest)
    )

@router.post("/events/{event_id}/upload")
async def upload_guest_list(
    event_id: int,
    replace: bool = Query(False),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Import a guest list from an Excel file"""
    if not EventRepo.get_by_id(db, event_id):
        raise not_found_error("Event")

    if not file.filename.endswith(('.xlsx', '.xls')):
        return error_response(
            message="Invalid file format. Please upload an Excel file (.xlsx or .xls)",
            status_code=400
        )

    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        return error_response(message="File is too large", status_code=413)

    success, errors, processed_count = ExcelService.process_excel_upload(
        file_content=file_content,
        event_id=event_id,
        db=db,
        replace=replace
    )

    if not success:
        return error_response(
            message="Excel file validation failed",
            details=errors,
            status_code=422
        )

    return success_response(
        message=f"Excel file processed successfully. {processed_count} guests imported.",
        data={
            "processed_count": processed_count,
            "filename": file.filename
        }
    )

@router.get("/events/{event_id}/export/seating.xlsx")
async def export_seating(
    event_id: int,
    db: Session = Depends(get_db),
    token: str = Depends(verify_admin_token)
):
    """Export the current seating chart to Excel"""
    event = EventRepo.get_by_id(db, event_id)
    if not event:
        raise not_found_error("Event")

    excel_content = ExcelService.export_seating(event_id, db)

    return Response(
        content=excel_content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename=seating_{event.public_code}.xlsx"}
    )
