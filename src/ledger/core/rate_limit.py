"""Rate limiting configuration using slowapi."""

import re

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from ledger.core.config import settings

_SECONDS_PER_UNIT = {
    "second": 1,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
}


def _retry_after_seconds(detail: str) -> int:
    """Derive a Retry-After value from a slowapi detail like "5 per 1 minute"."""
    match = re.search(r"(\d+)\s+per\s+(\d+)\s+(\w+)", detail)
    if not match:
        return 60
    amount = int(match.group(2))
    unit = match.group(3).rstrip("s")
    return amount * _SECONDS_PER_UNIT.get(unit, 60)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Custom exception handler for rate limit exceeded errors.

    Args:
        request: The incoming request
        exc: The RateLimitExceeded exception

    Returns:
        JSONResponse (429) with error details and a Retry-After header
    """
    retry_after = _retry_after_seconds(str(exc.detail))
    response = JSONResponse(
        status_code=429,
        content={
            "detail": f"Rate limit exceeded: {exc.detail}",
            "retry_after": retry_after,
        },
    )
    response.headers["Retry-After"] = str(retry_after)
    return response


def action_rate_limit() -> str:
    """Limit applied to balance mutation batches, read per request from settings."""
    return settings.ACTION_RATE_LIMIT


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],  # No default limits - each endpoint sets its own limit
    enabled=settings.RATE_LIMIT_ENABLED,
    headers_enabled=False,
)
