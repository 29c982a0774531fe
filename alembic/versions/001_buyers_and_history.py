"""create buyers and buyer_history tables

Revision ID: 001
Revises:
Create Date: 2026-10-18

Creates the buyers lead table and its append-only history table. History
rows are removed by ON DELETE CASCADE when their buyer is deleted.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "buyers",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("full_name", sa.String(80), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(15), nullable=False),
        sa.Column("city", sa.String(20), nullable=False),
        sa.Column("property_type", sa.String(20), nullable=False),
        sa.Column("bhk", sa.String(10), nullable=True),
        sa.Column("purpose", sa.String(10), nullable=False),
        sa.Column("budget_min", sa.BigInteger, nullable=True),
        sa.Column("budget_max", sa.BigInteger, nullable=True),
        sa.Column("timeline", sa.String(20), nullable=False),
        sa.Column("source", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="New"),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("owner_id", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_buyers_city", "buyers", ["city"])
    op.create_index("ix_buyers_property_type", "buyers", ["property_type"])
    op.create_index("ix_buyers_status", "buyers", ["status"])
    op.create_index("ix_buyers_timeline", "buyers", ["timeline"])
    op.create_index("ix_buyers_owner_id", "buyers", ["owner_id"])
    op.create_index("ix_buyers_updated_at", "buyers", ["updated_at"])

    op.create_table(
        "buyer_history",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column(
            "buyer_id",
            sa.Uuid,
            sa.ForeignKey("buyers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("changed_by", sa.String(100), nullable=True),
        sa.Column("changed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("diff", sa.JSON, nullable=False),
    )
    op.create_index("ix_buyer_history_buyer_id", "buyer_history", ["buyer_id"])
    op.create_index("ix_buyer_history_changed_at", "buyer_history", ["changed_at"])


def downgrade() -> None:
    op.drop_index("ix_buyer_history_changed_at", table_name="buyer_history")
    op.drop_index("ix_buyer_history_buyer_id", table_name="buyer_history")
    op.drop_table("buyer_history")

    op.drop_index("ix_buyers_updated_at", table_name="buyers")
    op.drop_index("ix_buyers_owner_id", table_name="buyers")
    op.drop_index("ix_buyers_timeline", table_name="buyers")
    op.drop_index("ix_buyers_status", table_name="buyers")
    op.drop_index("ix_buyers_property_type", table_name="buyers")
    op.drop_index("ix_buyers_city", table_name="buyers")
    op.drop_table("buyers")
