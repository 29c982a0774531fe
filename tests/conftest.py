"""Shared test fixtures for settings, async database sessions, and buyer records."""

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from buyer_api.core.config import Settings
from buyer_api.core.database import enable_sqlite_foreign_keys
from buyer_api.lib.importer import BuyerCandidate, BuyerRecord, validate_record
from buyer_api.models.base import Base

CSV_HEADER = "fullName,email,phone,city,propertyType,bhk,purpose,budgetMin,budgetMax,timeline,source,notes,tags,status"


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        database_url="sqlite+aiosqlite:///:memory:",
        environment="development",
    )


@pytest.fixture
async def async_engine(settings: Settings) -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine with foreign keys enforced."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    session_factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def buyer_data() -> dict[str, object]:
    """Wire-named values of a valid Apartment buyer."""
    return {
        "fullName": "Asha Verma",
        "email": "asha@example.com",
        "phone": "9876543210",
        "city": "Chandigarh",
        "propertyType": "Apartment",
        "bhk": "TWO",
        "purpose": "Buy",
        "budgetMin": 5000000,
        "budgetMax": 6000000,
        "timeline": "ZERO_TO_3M",
        "source": "Website",
        "notes": "Prefers east facing",
        "tags": ["hot", "family"],
    }


@pytest.fixture
def valid_record(buyer_data: dict[str, object]) -> BuyerRecord:
    """A validated buyer record."""
    return validate_record(BuyerCandidate.from_mapping(buyer_data))


@pytest.fixture
def csv_header() -> str:
    return CSV_HEADER
