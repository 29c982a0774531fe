"""BuyerHistory model — immutable audit trail of buyer mutations."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, DateTime, ForeignKey, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from buyer_api.models.base import Base, UUIDMixin, utcnow

if TYPE_CHECKING:
    from buyer_api.models.buyer import Buyer


class BuyerHistory(Base, UUIDMixin):
    """Write-only record of one buyer mutation. Removed only by cascade from its buyer."""

    __tablename__ = "buyer_history"

    buyer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("buyers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    changed_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    diff: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    buyer: Mapped["Buyer"] = relationship(back_populates="history", lazy="raise")
