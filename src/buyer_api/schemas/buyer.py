"""Buyer Pydantic v2 request/response schemas.

Wire names are camelCase. Request bodies are deliberately loose; the record
validator decides acceptability so API and CSV imports report identical
messages.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from buyer_api.lib.exporter.budget import format_budget
from buyer_api.lib.importer.validator import BuyerCandidate
from buyer_api.schemas.common import PaginationMeta
from buyer_api.schemas.history import HistoryEntryResponse


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BuyerPayload(_CamelModel):
    """Create/replace body for a buyer."""

    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    property_type: str | None = None
    bhk: str | None = None
    purpose: str | None = None
    budget_min: int | str | None = None
    budget_max: int | str | None = None
    timeline: str | None = None
    source: str | None = None
    status: str | None = None
    notes: str | None = None
    tags: list[str] | None = None

    def to_candidate(self) -> BuyerCandidate:
        return BuyerCandidate.from_mapping(self.model_dump(by_alias=True))


class StatusUpdate(BaseModel):
    """Body for a status-only change."""

    status: str | None = None


class BuyerResponse(_CamelModel):
    """A buyer as returned by the API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: UUID
    full_name: str
    email: str | None = None
    phone: str
    city: str
    property_type: str
    bhk: str | None = None
    purpose: str
    budget_min: int | None = None
    budget_max: int | None = None
    timeline: str
    source: str
    status: str
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)
    owner_id: str
    created_at: datetime
    updated_at: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def budget_display(self) -> str:
        """Lakh-denominated budget range for display."""
        return format_budget(self.budget_min, self.budget_max)


class BuyerDetailResponse(_CamelModel):
    """A buyer with its most recent history entries, newest first."""

    buyer: BuyerResponse
    history: list[HistoryEntryResponse] = Field(default_factory=list)


class PaginatedBuyerResponse(BaseModel):
    """Paginated list of buyers."""

    items: list[BuyerResponse]
    pagination: PaginationMeta


class DeleteResponse(BaseModel):
    message: str
