"""Rate limiting configuration for the MindForge API."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from mindforge.core.config import settings
from mindforge.core.logging import request_id_of

# Limits are per client address; 0 disables a limit
DEFAULT_LIMITS = (
    []
    if settings.is_testing or settings.RATE_LIMIT_API <= 0
    else [f"{settings.RATE_LIMIT_API}/minute"]
)

AUTH_LIMIT = (
    f"{settings.RATE_LIMIT_AUTH}/minute" if settings.RATE_LIMIT_AUTH > 0 else "1000000/minute"
)

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",
    default_limits=DEFAULT_LIMITS,
    enabled=not settings.is_testing,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render 429 in the standard fail envelope, keeping slowapi's limit headers."""
    response = JSONResponse(
        status_code=429,
        content={
            "status": "fail",
            "message": "Too many requests, please try again later.",
            "requestId": request_id_of(request),
        },
    )
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)
