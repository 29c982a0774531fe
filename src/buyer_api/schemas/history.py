"""History diff payloads as a tagged union discriminated on ``action``.

Snapshot variants (created/imported) carry the submitted record; change
variants (updated/status-updated) carry a field-keyed map of old/new pairs.
"""

from datetime import UTC, datetime
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


def _now() -> datetime:
    return datetime.now(UTC)


class FieldChange(BaseModel):
    """Before/after values of one tracked field."""

    old: Any
    new: Any


class CreatedDiff(BaseModel):
    action: Literal["CREATED"] = "CREATED"
    timestamp: datetime = Field(default_factory=_now)
    record: dict[str, Any]


class ImportedDiff(BaseModel):
    action: Literal["IMPORTED"] = "IMPORTED"
    timestamp: datetime = Field(default_factory=_now)
    record: dict[str, Any]


class UpdatedDiff(BaseModel):
    action: Literal["UPDATED"] = "UPDATED"
    timestamp: datetime = Field(default_factory=_now)
    changes: dict[str, FieldChange]


class StatusUpdatedDiff(BaseModel):
    action: Literal["STATUS_UPDATED"] = "STATUS_UPDATED"
    timestamp: datetime = Field(default_factory=_now)
    changes: dict[Literal["status"], FieldChange]


HistoryDiff = Annotated[
    CreatedDiff | ImportedDiff | UpdatedDiff | StatusUpdatedDiff,
    Field(discriminator="action"),
]

history_diff_adapter: TypeAdapter[HistoryDiff] = TypeAdapter(HistoryDiff)


def dump_diff(diff: CreatedDiff | ImportedDiff | UpdatedDiff | StatusUpdatedDiff) -> dict[str, Any]:
    """Serialize a diff variant into the JSON shape stored on the history row."""
    return diff.model_dump(mode="json")


def load_diff(payload: dict[str, Any]) -> CreatedDiff | ImportedDiff | UpdatedDiff | StatusUpdatedDiff:
    """Parse a stored JSON payload back into its variant."""
    return history_diff_adapter.validate_python(payload)


class HistoryEntryResponse(BaseModel):
    """One audit entry for a buyer."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: UUID
    buyer_id: UUID
    changed_by: str | None = None
    changed_at: datetime
    diff: HistoryDiff
