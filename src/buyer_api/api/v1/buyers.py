"""Buyer API endpoints: list, create, detail, replace, status change, delete."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from buyer_api.api.rate_limit import rate_limited
from buyer_api.core.config import Settings
from buyer_api.core.dependencies import get_app_settings, get_async_session, get_current_user_id
from buyer_api.core.errors import BuyerNotFoundError, RecordValidationError
from buyer_api.lib.exporter import parse_filters
from buyer_api.lib.importer import validate_record
from buyer_api.lib.rate_limiter import RateLimitResult
from buyer_api.models.enums import Status
from buyer_api.schemas.buyer import (
    BuyerDetailResponse,
    BuyerPayload,
    BuyerResponse,
    DeleteResponse,
    PaginatedBuyerResponse,
    StatusUpdate,
)
from buyer_api.schemas.common import PaginationMeta
from buyer_api.schemas.history import HistoryEntryResponse
from buyer_api.services import buyer_service

buyers_router = APIRouter(prefix="/buyers", tags=["buyers"])

_NOT_FOUND_DETAIL = "Buyer not found"


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND_DETAIL)


@buyers_router.get(
    "",
    response_model=PaginatedBuyerResponse,
)
async def list_buyers_endpoint(
    search: str | None = Query(None),
    city: str | None = Query(None),
    property_type: str | None = Query(None, alias="propertyType"),
    buyer_status: str | None = Query(None, alias="status"),
    timeline: str | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100, alias="pageSize"),
    session: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_app_settings),
) -> PaginatedBuyerResponse:
    """List buyers, most recently updated first, with search and filters."""
    filters = parse_filters(
        search=search,
        city=city,
        property_type=property_type,
        status=buyer_status,
        timeline=timeline,
    )
    page_size = min(page_size, settings.list_page_size_max)
    buyers, total = await buyer_service.list_buyers(session, filters, page=page, page_size=page_size)
    return PaginatedBuyerResponse(
        items=[BuyerResponse.model_validate(b) for b in buyers],
        pagination=PaginationMeta(
            total=total,
            page=page,
            page_size=page_size,
            total_pages=buyer_service.total_pages(total, page_size),
        ),
    )


@buyers_router.post(
    "",
    response_model=BuyerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_buyer_endpoint(
    payload: BuyerPayload,
    _rate_limit: Annotated[RateLimitResult, Depends(rate_limited("create"))],
    user_id: Annotated[str, Depends(get_current_user_id)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> BuyerResponse:
    """Create a buyer owned by the caller."""
    record = validate_record(payload.to_candidate())
    buyer = await buyer_service.create_buyer(session, record, owner_id=user_id)
    return BuyerResponse.model_validate(buyer)


@buyers_router.get(
    "/{buyer_id}",
    response_model=BuyerDetailResponse,
)
async def get_buyer_endpoint(
    buyer_id: uuid.UUID,
    session: AsyncSession = Depends(get_async_session),
) -> BuyerDetailResponse:
    """Get a buyer with its ten most recent history entries."""
    try:
        buyer, history = await buyer_service.get_buyer_with_history(session, buyer_id)
    except BuyerNotFoundError:
        raise _not_found() from None
    return BuyerDetailResponse(
        buyer=BuyerResponse.model_validate(buyer),
        history=[HistoryEntryResponse.model_validate(entry) for entry in history],
    )


@buyers_router.put(
    "/{buyer_id}",
    response_model=BuyerResponse,
)
async def update_buyer_endpoint(
    buyer_id: uuid.UUID,
    payload: BuyerPayload,
    _rate_limit: Annotated[RateLimitResult, Depends(rate_limited("update"))],
    user_id: Annotated[str, Depends(get_current_user_id)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> BuyerResponse:
    """Replace a buyer's fields. Omitting ``status`` keeps the current one."""
    candidate = payload.to_candidate()
    record = validate_record(candidate)
    try:
        buyer = await buyer_service.update_buyer(
            session,
            buyer_id,
            record,
            changed_by=user_id,
            keep_status=candidate.status is None,
        )
    except BuyerNotFoundError:
        raise _not_found() from None
    return BuyerResponse.model_validate(buyer)


@buyers_router.patch(
    "/{buyer_id}/status",
    response_model=BuyerResponse,
)
async def update_buyer_status_endpoint(
    buyer_id: uuid.UUID,
    body: StatusUpdate,
    _rate_limit: Annotated[RateLimitResult, Depends(rate_limited("update"))],
    user_id: Annotated[str, Depends(get_current_user_id)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> BuyerResponse:
    """Change only a buyer's status."""
    raw_status = (body.status or "").strip()
    if not raw_status:
        raise RecordValidationError("status", "status is required")
    try:
        new_status = Status(raw_status)
    except ValueError:
        allowed = ", ".join(member.value for member in Status)
        raise RecordValidationError(
            "status", f"status: invalid value {raw_status!r} (expected one of: {allowed})"
        ) from None

    try:
        buyer = await buyer_service.update_buyer_status(session, buyer_id, new_status, changed_by=user_id)
    except BuyerNotFoundError:
        raise _not_found() from None
    return BuyerResponse.model_validate(buyer)


@buyers_router.delete(
    "/{buyer_id}",
    response_model=DeleteResponse,
)
async def delete_buyer_endpoint(
    buyer_id: uuid.UUID,
    session: AsyncSession = Depends(get_async_session),
) -> DeleteResponse:
    """Delete a buyer and its history."""
    try:
        await buyer_service.delete_buyer(session, buyer_id)
    except BuyerNotFoundError:
        raise _not_found() from None
    return DeleteResponse(message="Buyer deleted successfully")
