"""
Security utilities and authentication
"""

import logging
import secrets
import time
from collections import defaultdict
from typing import Optional

from fastapi import HTTPException, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import settings

logger = logging.getLogger(__name__)

# Simple in-memory rate limiter: client ip -> request timestamps
rate_limiter = defaultdict(list)

# auto_error=False so a missing header gets the same 401 as a wrong token
security = HTTPBearer(auto_error=False)

def verify_admin_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)):
    """Verify admin authentication token"""
    if credentials is None or not secrets.compare_digest(credentials.credentials, settings.ADMIN_TOKEN):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return credentials.credentials

def rate_limit_check(client_ip: str, limit: Optional[int] = None, window_seconds: int = 60) -> bool:
    """Sliding-window rate limit per client IP"""
    if limit is None:
        limit = settings.RATE_LIMIT_PER_MINUTE

    now = time.time()
    window_start = now - window_seconds
    recent = [t for t in rate_limiter[client_ip] if t > window_start]

    if len(recent) >= limit:
        rate_limiter[client_ip] = recent
        logger.warning("Rate limit hit for %s", client_ip)
        return False

    recent.append(now)
    rate_limiter[client_ip] = recent
    return True

def get_client_ip(request) -> str:
    """Extract client IP from request"""
    # Check for forwarded IP first (for reverse proxy setups)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"
