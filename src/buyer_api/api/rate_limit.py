"""Per-operation-class rate limiting dependency for buyer write endpoints."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request, Response

from buyer_api.core.config import Settings
from buyer_api.core.dependencies import get_app_settings, get_rate_limiters
from buyer_api.core.errors import RateLimitExceeded
from buyer_api.lib.rate_limiter import RateLimiters, RateLimitResult, get_caller_identity


def set_rate_limit_headers(response: Response, limit: int, result: RateLimitResult) -> None:
    """Attach the allowance of the current window to a response."""
    response.headers["X-RateLimit-Limit"] = str(limit)
    response.headers["X-RateLimit-Remaining"] = str(result.remaining)
    response.headers["X-RateLimit-Reset"] = str(result.reset_time_ms)


def rate_limited(kind: str) -> Callable[..., RateLimitResult]:
    """Factory that creates a dependency consuming one unit of a limiter class.

    Args:
        kind: Limiter class name ("create" or "update").

    Returns:
        A FastAPI dependency that raises ``RateLimitExceeded`` when the
        caller's allowance is exhausted.
    """

    def check(
        request: Request,
        response: Response,
        limiters: Annotated[RateLimiters, Depends(get_rate_limiters)],
        settings: Annotated[Settings, Depends(get_app_settings)],
    ) -> RateLimitResult:
        limiter = limiters.get(kind)
        identity = get_caller_identity(request, settings.trusted_proxy_header_list)
        result = limiter.check_limit(identity)
        if not result.allowed:
            raise RateLimitExceeded(
                limit=limiter.limit,
                remaining=result.remaining,
                reset_time_ms=result.reset_time_ms,
                message=result.message or limiter.config.message,
            )
        set_rate_limit_headers(response, limiter.limit, result)
        return result

    return check
