"""Buyer service — create, read, update, delete, and search buyer leads.

Every mutation that changes a tracked field writes its history entry in the
same transaction as the buyer row.
"""

import math
import uuid

from loguru import logger
from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from buyer_api.core.errors import BuyerNotFoundError
from buyer_api.lib.exporter.filters import BuyerFilters
from buyer_api.lib.importer.validator import BuyerRecord
from buyer_api.models.buyer import Buyer, snapshot_from_columns
from buyer_api.models.buyer_history import BuyerHistory
from buyer_api.models.enums import Status
from buyer_api.services.history_service import created_entry, list_history, status_entry, updated_entry

# Columns covered by the free-text search term
_SEARCH_COLUMNS = (
    Buyer.full_name,
    Buyer.phone,
    Buyer.email,
    Buyer.city,
    Buyer.property_type,
    Buyer.status,
    Buyer.source,
    Buyer.notes,
)


def _like_pattern(term: str) -> str:
    """Substring LIKE pattern with wildcard characters in ``term`` escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def apply_buyer_filters(query: Select, filters: BuyerFilters) -> Select:
    """Restrict a buyer query by exact-match filters AND a case-insensitive search.

    Args:
        query: A select over ``Buyer`` (or a count over it).
        filters: Validated filter values.

    Returns:
        The filtered query.
    """
    if filters.city:
        query = query.where(Buyer.city == filters.city.value)
    if filters.property_type:
        query = query.where(Buyer.property_type == filters.property_type.value)
    if filters.status:
        query = query.where(Buyer.status == filters.status.value)
    if filters.timeline:
        query = query.where(Buyer.timeline == filters.timeline.value)
    if filters.search:
        pattern = _like_pattern(filters.search)
        query = query.where(or_(*(column.ilike(pattern, escape="\\") for column in _SEARCH_COLUMNS)))
    return query


async def list_buyers(
    session: AsyncSession,
    filters: BuyerFilters,
    *,
    page: int = 1,
    page_size: int = 10,
) -> tuple[list[Buyer], int]:
    """List buyers matching the filters, most recently updated first.

    Args:
        session: Database session.
        filters: Validated filter values.
        page: Page number (1-based).
        page_size: Items per page.

    Returns:
        Tuple of (buyers on the page, total matching count).
    """
    count_query = apply_buyer_filters(select(func.count(Buyer.id)), filters)
    total = (await session.execute(count_query)).scalar_one()

    offset = (page - 1) * page_size
    query = apply_buyer_filters(select(Buyer), filters)
    query = query.order_by(Buyer.updated_at.desc()).offset(offset).limit(page_size)
    result = await session.execute(query)
    return list(result.scalars().all()), total


async def find_all_buyers(session: AsyncSession, filters: BuyerFilters) -> list[Buyer]:
    """Every buyer matching the filters, most recently updated first (no pagination)."""
    query = apply_buyer_filters(select(Buyer), filters).order_by(Buyer.updated_at.desc())
    result = await session.execute(query)
    return list(result.scalars().all())


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if total else 0


async def get_buyer(session: AsyncSession, buyer_id: uuid.UUID) -> Buyer | None:
    """Get a buyer by ID."""
    result = await session.execute(select(Buyer).where(Buyer.id == buyer_id))
    return result.scalar_one_or_none()


async def _require_buyer(session: AsyncSession, buyer_id: uuid.UUID) -> Buyer:
    buyer = await get_buyer(session, buyer_id)
    if buyer is None:
        raise BuyerNotFoundError(str(buyer_id))
    return buyer


async def get_buyer_with_history(
    session: AsyncSession,
    buyer_id: uuid.UUID,
    *,
    history_limit: int = 10,
) -> tuple[Buyer, list[BuyerHistory]]:
    """Get a buyer and its most recent history entries.

    Raises:
        BuyerNotFoundError: If the buyer does not exist.
    """
    buyer = await _require_buyer(session, buyer_id)
    history = await list_history(session, buyer_id, limit=history_limit)
    return buyer, history


async def create_buyer(session: AsyncSession, record: BuyerRecord, *, owner_id: str) -> Buyer:
    """Persist a validated buyer together with its CREATED history entry.

    Args:
        session: Database session.
        record: The validated record.
        owner_id: Identifier of the creating caller, also recorded as ``changed_by``.

    Returns:
        The created Buyer.
    """
    buyer = Buyer(id=uuid.uuid4(), owner_id=owner_id, **record.to_columns())
    session.add(buyer)
    session.add(created_entry(buyer.id, owner_id, record.to_snapshot()))
    await session.commit()
    logger.info(f"Created buyer {buyer.id} (owner={owner_id})")
    return buyer


async def update_buyer(
    session: AsyncSession,
    buyer_id: uuid.UUID,
    record: BuyerRecord,
    *,
    changed_by: str | None,
    keep_status: bool = False,
) -> Buyer:
    """Replace a buyer's business fields and record the field-level diff.

    No history entry is written when nothing changed.

    Args:
        session: Database session.
        buyer_id: The buyer to update.
        record: The validated replacement values.
        changed_by: Identifier of the caller.
        keep_status: Keep the current status instead of the record's default.

    Returns:
        The updated Buyer.

    Raises:
        BuyerNotFoundError: If the buyer does not exist.
    """
    buyer = await _require_buyer(session, buyer_id)
    before = buyer.to_snapshot()

    columns = record.to_columns()
    if keep_status:
        columns["status"] = buyer.status

    entry = updated_entry(buyer.id, changed_by, before, snapshot_from_columns(columns))
    if entry is None:
        logger.debug(f"Update of buyer {buyer_id} changed nothing; history suppressed")
        return buyer

    for name, value in columns.items():
        setattr(buyer, name, value)
    session.add(entry)
    await session.commit()
    logger.info(f"Updated buyer {buyer_id}: {', '.join(entry.diff['changes'])}")
    return buyer


async def update_buyer_status(
    session: AsyncSession,
    buyer_id: uuid.UUID,
    status: Status,
    *,
    changed_by: str | None,
) -> Buyer:
    """Change only a buyer's status.

    Raises:
        BuyerNotFoundError: If the buyer does not exist.
    """
    buyer = await _require_buyer(session, buyer_id)
    entry = status_entry(buyer.id, changed_by, buyer.status, status.value)
    if entry is None:
        return buyer

    old_status = buyer.status
    buyer.status = status.value
    session.add(entry)
    await session.commit()
    logger.info(f"Buyer {buyer_id} status {old_status} -> {status.value}")
    return buyer


async def delete_buyer(session: AsyncSession, buyer_id: uuid.UUID) -> None:
    """Delete a buyer; its history is removed by the foreign key cascade.

    Raises:
        BuyerNotFoundError: If the buyer does not exist.
    """
    buyer = await _require_buyer(session, buyer_id)
    await session.delete(buyer)
    await session.commit()
    logger.info(f"Deleted buyer {buyer_id}")

