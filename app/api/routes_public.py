"""
Public API routes - no authentication required
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.guest import LookupRequest
from app.services.excel_service import ExcelService
from app.services.seating_service import SeatingService
from app.utils.security import rate_limit_check, get_client_ip
from app.utils.responses import success_response, error_response, rate_limit_error

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/template/guest_list_template.xlsx")
async def download_template():
    """Download Excel template for guest list import"""
    template_bytes = ExcelService.create_template()

    return Response(
        content=template_bytes,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=guest_list_template.xlsx"}
    )

@router.post("/lookup")
async def lookup_guest(
    request: Request,
    lookup_data: LookupRequest,
    db: Session = Depends(get_db)
):
    """Look up guest seating information"""
    # Rate limiting
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        raise rate_limit_error()

    seating_info = SeatingService.get_guest_seating_info(
        public_code=lookup_data.public_code,
        guest_name=lookup_data.name,
        db=db
    )

    if not seating_info:
        return error_response(
            message="Guest not found. Please check your name spelling or contact the organizer.",
            status_code=404
        )

    return success_response(
        message="Guest information found",
        data=seating_info.model_dump()
    )
