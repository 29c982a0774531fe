"""Import API endpoint.

POST /buyers/import (multipart CSV upload, all-or-nothing).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from buyer_api.core.config import Settings
from buyer_api.core.dependencies import get_app_settings, get_async_session, get_current_user_id
from buyer_api.schemas.imports import ImportResult
from buyer_api.services.import_service import import_buyers_csv

imports_router = APIRouter(prefix="/buyers", tags=["imports"])


@imports_router.post("/import", response_model=ImportResult)
async def import_buyers(
    user_id: Annotated[str, Depends(get_current_user_id)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    file: Annotated[UploadFile | None, File()] = None,
) -> ImportResult:
    """Upload a buyer CSV. Nothing is stored unless every row is valid."""
    content = await file.read() if file is not None else None
    return await import_buyers_csv(
        session,
        filename=file.filename if file is not None else None,
        content=content,
        owner_id=user_id,
        max_bytes=settings.import_max_file_size_bytes,
        max_rows=settings.import_max_rows,
        content_type=file.content_type if file is not None else None,
    )
