"""
Security utilities and authentication
"""

import secrets
import time
from collections import defaultdict

from fastapi import HTTPException, Depends, Header, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from rsvp.core.config import settings
from rsvp.utils.responses import rate_limit_error

# Simple in-memory rate limiter
rate_limiter = defaultdict(list)

security = HTTPBearer()

def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)) -> str:
    """Verify admin authentication token and return the admin identity"""
    if not secrets.compare_digest(credentials.credentials, settings.ADMIN_TOKEN):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token"
        )
    return settings.ADMIN_EMAIL

def rate_limit_check(client_ip: str, limit: int = None) -> bool:
    """Simple rate limiting by IP address"""
    if limit is None:
        limit = settings.RATE_LIMIT_PER_MINUTE

    current_time = time.time()
    minute_ago = current_time - 60

    # Drop clients with no request inside the window
    for ip, times in list(rate_limiter.items()):
        if not times or times[-1] <= minute_ago:
            rate_limiter.pop(ip, None)

    # Clean old requests
    recent = [
        req_time for req_time in rate_limiter.get(client_ip, [])
        if req_time > minute_ago
    ]

    # Check limit
    if len(recent) >= limit:
        rate_limiter[client_ip] = recent
        return False

    # Add current request
    recent.append(current_time)
    rate_limiter[client_ip] = recent
    return True

def get_client_ip(request) -> str:
    """Extract client IP from request"""
    if settings.TRUST_PROXY_HEADERS:
        # Check for forwarded IP first (for reverse proxy setups)
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        # Check for real IP header
        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

    # Fall back to direct client IP
    return request.client.host if request.client else "unknown"

def enforce_rate_limit(request: Request) -> None:
    """Dependency applying the per-IP limit to guest-facing routes"""
    if not rate_limit_check(get_client_ip(request)):
        rate_limit_error()

def invitation_code_header(x_invitation_code: str = Header(..., alias="X-Invitation-Code")) -> str:
    """The invitation code, sent fresh with every guest-facing call"""
    return x_invitation_code
