"""Rate limiter library public API."""

from buyer_api.lib.rate_limiter.identity import USER_ID_HEADER, get_caller_identity, get_client_ip
from buyer_api.lib.rate_limiter.limiter import (
    BUYER_CREATE,
    BUYER_UPDATE,
    RateLimitConfig,
    RateLimiter,
    RateLimiters,
    RateLimitResult,
    RateLimitStore,
    build_rate_limiters,
    sweep_expired_buckets,
)

__all__ = [
    "BUYER_CREATE",
    "BUYER_UPDATE",
    "USER_ID_HEADER",
    "RateLimitConfig",
    "RateLimitResult",
    "RateLimitStore",
    "RateLimiter",
    "RateLimiters",
    "build_rate_limiters",
    "get_caller_identity",
    "get_client_ip",
    "sweep_expired_buckets",
]
