"""Export API endpoint: the filtered buyer list as a CSV download."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from buyer_api.core.dependencies import get_async_session
from buyer_api.lib.exporter import parse_filters
from buyer_api.services.export_service import export_buyers_csv

exports_router = APIRouter(prefix="/buyers", tags=["exports"])


@exports_router.get("/export")
async def export_buyers(
    search: str | None = Query(None),
    city: str | None = Query(None),
    property_type: str | None = Query(None, alias="propertyType"),
    buyer_status: str | None = Query(None, alias="status"),
    timeline: str | None = Query(None),
    session: AsyncSession = Depends(get_async_session),
) -> Response:
    """Download every buyer matching the filters as CSV, most recently updated first."""
    filters = parse_filters(
        search=search,
        city=city,
        property_type=property_type,
        status=buyer_status,
        timeline=timeline,
    )
    result = await export_buyers_csv(session, filters)
    return Response(
        content=result.content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{result.filename}"',
            "Cache-Control": "no-cache",
        },
    )
