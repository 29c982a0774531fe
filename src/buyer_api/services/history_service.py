"""History recording — one immutable entry per auditable buyer mutation."""

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from buyer_api.lib.importer.differ import detect_field_changes, detect_status_change
from buyer_api.models.buyer_history import BuyerHistory
from buyer_api.schemas.history import (
    CreatedDiff,
    FieldChange,
    ImportedDiff,
    StatusUpdatedDiff,
    UpdatedDiff,
    dump_diff,
)


def _entry(buyer_id: uuid.UUID, changed_by: str | None, diff: Any) -> BuyerHistory:
    return BuyerHistory(buyer_id=buyer_id, changed_by=changed_by, diff=dump_diff(diff))


def created_entry(buyer_id: uuid.UUID, changed_by: str | None, snapshot: dict[str, Any]) -> BuyerHistory:
    """History entry holding the full submitted record of a new buyer."""
    return _entry(buyer_id, changed_by, CreatedDiff(record=snapshot))


def imported_entry(buyer_id: uuid.UUID, changed_by: str | None, snapshot: dict[str, Any]) -> BuyerHistory:
    """History entry holding the full submitted record of an imported buyer."""
    return _entry(buyer_id, changed_by, ImportedDiff(record=snapshot))


def updated_entry(
    buyer_id: uuid.UUID,
    changed_by: str | None,
    before: dict[str, Any],
    after: dict[str, Any],
) -> BuyerHistory | None:
    """History entry for a full update, or ``None`` when no tracked field changed."""
    changes = detect_field_changes(before, after)
    if not changes:
        return None
    diff = UpdatedDiff(changes={name: FieldChange(old=old, new=new) for name, (old, new) in changes.items()})
    return _entry(buyer_id, changed_by, diff)


def status_entry(
    buyer_id: uuid.UUID,
    changed_by: str | None,
    old_status: str,
    new_status: str,
) -> BuyerHistory | None:
    """History entry for a status-only change, or ``None`` when the status is unchanged."""
    changes = detect_status_change(old_status, new_status)
    if not changes:
        return None
    old, new = changes["status"]
    return _entry(buyer_id, changed_by, StatusUpdatedDiff(changes={"status": FieldChange(old=old, new=new)}))


async def list_history(
    session: AsyncSession,
    buyer_id: uuid.UUID,
    *,
    limit: int = 10,
) -> list[BuyerHistory]:
    """Most recent history entries for a buyer, newest first."""
    result = await session.execute(
        select(BuyerHistory)
        .where(BuyerHistory.buyer_id == buyer_id)
        .order_by(BuyerHistory.changed_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
