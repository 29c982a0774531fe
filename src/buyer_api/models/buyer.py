"""Buyer model — a prospective property buyer lead."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, BigInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from buyer_api.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from buyer_api.models.buyer_history import BuyerHistory

# Wire name -> column attribute for every business field carried in history snapshots
SNAPSHOT_COLUMNS: dict[str, str] = {
    "fullName": "full_name",
    "email": "email",
    "phone": "phone",
    "city": "city",
    "propertyType": "property_type",
    "bhk": "bhk",
    "purpose": "purpose",
    "budgetMin": "budget_min",
    "budgetMax": "budget_max",
    "timeline": "timeline",
    "source": "source",
    "status": "status",
    "notes": "notes",
    "tags": "tags",
}


def snapshot_from_columns(columns: Mapping[str, Any]) -> dict[str, Any]:
    """Re-key column-named business values by wire name."""
    snapshot = {wire: columns[column] for wire, column in SNAPSHOT_COLUMNS.items()}
    snapshot["tags"] = list(snapshot["tags"] or [])
    return snapshot


class Buyer(Base, UUIDMixin, TimestampMixin):
    """Buyer lead record. Categorical columns hold closed-enum string values."""

    __tablename__ = "buyers"

    full_name: Mapped[str] = mapped_column(String(80), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str] = mapped_column(String(15), nullable=False)

    city: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    property_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    bhk: Mapped[str | None] = mapped_column(String(10), nullable=True)
    purpose: Mapped[str] = mapped_column(String(10), nullable=False)

    budget_min: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    budget_max: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    timeline: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    source: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="New", server_default="New", index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    owner_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    history: Mapped[list["BuyerHistory"]] = relationship(
        back_populates="buyer",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<Buyer {self.id} {self.full_name!r} status={self.status}>"

    def to_snapshot(self) -> dict[str, Any]:
        """Business fields keyed by wire name, as stored in history payloads."""
        return snapshot_from_columns({column: getattr(self, column) for column in SNAPSHOT_COLUMNS.values()})
