"""
Standardized response utilities
"""

from typing import Any, Optional
from fastapi import HTTPException, status
from fastapi.responses import JSONResponse

from app.schemas.common import StandardResponse, ErrorResponse
from app.services.errors import SeatingError

def success_response(
    message: str,
    data: Any = None,
    status_code: int = 200
) -> JSONResponse:
    """Create standardized success response"""
    response = StandardResponse(
        success=True,
        message=message,
        data=data
    )
    return JSONResponse(
        content=response.model_dump(mode="json"),
        status_code=status_code
    )

def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = 400
) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(
        message=message,
        error_code=error_code,
        details=details
    )
    return JSONResponse(
        content=response.model_dump(mode="json"),
        status_code=status_code
    )

def not_found_error(resource: str = "Resource"):
    """Create not found error"""
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{resource} not found"
    )

def rate_limit_error():
    """Create rate limit error"""
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Rate limit exceeded. Please try again later."
    )

def seating_error_response(exc: SeatingError) -> JSONResponse:
    """Translate a seating service error into the standard error envelope"""
    return error_response(
        message=exc.message,
        error_code=type(exc).__name__,
        status_code=exc.status_code
    )
