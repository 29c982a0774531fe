"""Export service — renders the filtered buyer list as a CSV attachment."""

from dataclasses import dataclass
from datetime import date

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from buyer_api.lib.exporter import BuyerFilters, export_filename, render_csv
from buyer_api.services.buyer_service import find_all_buyers


@dataclass(frozen=True)
class ExportResult:
    """Rendered CSV text plus its suggested download filename."""

    content: str
    filename: str
    record_count: int


async def export_buyers_csv(
    session: AsyncSession,
    filters: BuyerFilters,
    *,
    today: date | None = None,
) -> ExportResult:
    """Export every buyer matching the filters, most recently updated first.

    Args:
        session: Database session.
        filters: Validated search term and exact-match filters.
        today: Date stamped into the filename. Defaults to the current UTC date.

    Returns:
        The CSV text, filename, and number of exported records.
    """
    buyers = await find_all_buyers(session, filters)
    content, count = render_csv(buyer.to_snapshot() for buyer in buyers)
    filename = export_filename(filters, today)
    logger.info(f"Exported {count} buyers to {filename}")
    return ExportResult(content=content, filename=filename, record_count=count)
