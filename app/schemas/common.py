"""
Response envelope schemas shared by all routes
"""

from typing import Any, Optional
from pydantic import BaseModel

class StandardResponse(BaseModel):
    """Standard API response"""
    success: bool
    message: str
    data: Optional[Any] = None

class ErrorResponse(BaseModel):
    """Error response; error_code is the seating error class name when there is one"""
    success: bool = False
    message: str
    error_code: Optional[str] = None
    details: Optional[Any] = None

class Pagination(BaseModel):
    page: int
    per_page: int
    total: int
    pages: int

    @classmethod
    def of(cls, page: int, per_page: int, total: int) -> "Pagination":
        return cls(page=page, per_page=per_page, total=total, pages=(total + per_page - 1) // per_page)
