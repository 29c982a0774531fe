"""Field-level change detection for buyer history entries."""

import json
from collections.abc import Mapping, Sequence
from typing import Any

# Business fields audited on update; system fields (updatedAt, ownerId) are not tracked
TRACKED_FIELDS: list[str] = [
    "fullName",
    "email",
    "phone",
    "city",
    "propertyType",
    "bhk",
    "purpose",
    "budgetMin",
    "budgetMax",
    "timeline",
    "source",
    "status",
    "notes",
    "tags",
]


def _serialized(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


def detect_field_changes(
    existing: Mapping[str, Any],
    incoming: Mapping[str, Any],
    compare_fields: Sequence[str] | None = None,
) -> dict[str, tuple[Any, Any]]:
    """Detect field-level changes between two snapshots of a buyer.

    Values are compared by their JSON serialization, so list order matters
    (reordered tags count as a change).

    Args:
        existing: The record before the mutation, keyed by wire name.
        incoming: The record after the mutation, keyed by wire name.
        compare_fields: Fields to compare (defaults to ``TRACKED_FIELDS``).

    Returns:
        Dictionary of field_name → (old_value, new_value) for changed fields.
        Empty when nothing changed; callers must then skip the history entry.
    """
    fields = TRACKED_FIELDS if compare_fields is None else compare_fields

    changes = {}
    for field in fields:
        old_val = existing.get(field)
        new_val = incoming.get(field)
        if _serialized(old_val) != _serialized(new_val):
            changes[field] = (old_val, new_val)

    return changes


def detect_status_change(old_status: str, new_status: str) -> dict[str, tuple[str, str]]:
    """Diff restricted to the ``status`` field."""
    return detect_field_changes({"status": old_status}, {"status": new_status}, ["status"])
