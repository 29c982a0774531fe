"""Fixtures for API tests: the full application over an in-memory database."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from buyer_api.core.config import Settings
from buyer_api.core.dependencies import get_async_session
from buyer_api.main import create_app


@pytest.fixture
def app(settings: Settings, async_engine: AsyncEngine) -> FastAPI:
    """Application wired to the test engine and settings."""
    application = create_app(settings)
    factory = async_sessionmaker(async_engine, expire_on_commit=False)

    async def _session() -> AsyncGenerator[AsyncSession]:
        async with factory() as session:
            yield session

    application.dependency_overrides[get_async_session] = _session
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
