"""FastAPI dependency injection for settings, database sessions, caller identity, and rate limiters."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from buyer_api.core.config import Settings
from buyer_api.core.database import get_session_factory
from buyer_api.lib.rate_limiter import USER_ID_HEADER, RateLimiters


def get_app_settings(request: Request) -> Settings:
    """Return the settings the running application was built with."""
    return request.app.state.settings


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


def get_current_user_id(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> str:
    """Return the caller's identifier.

    Authentication is mocked: the ``X-User-Id`` header identifies the caller,
    and unidentified callers act as the configured default owner.
    """
    user_id = request.headers.get(USER_ID_HEADER, "").strip()
    return user_id or settings.default_owner_id


def get_rate_limiters(request: Request) -> RateLimiters:
    """Return the limiters owned by the running application."""
    return request.app.state.rate_limiters
