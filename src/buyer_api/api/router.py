"""Root API router with /api/v1 prefix and middleware registration."""

from fastapi import APIRouter, FastAPI

from buyer_api.api.middleware import setup_cors
from buyer_api.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Import and export routes are registered before the buyer routes so their
    static paths win over ``/buyers/{buyer_id}``.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from buyer_api.api.v1.buyers import buyers_router
    from buyer_api.api.v1.exports import exports_router
    from buyer_api.api.v1.imports import imports_router

    root_router = APIRouter(prefix=settings.api_v1_prefix)
    root_router.include_router(imports_router)
    root_router.include_router(exports_router)
    root_router.include_router(buyers_router)

    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    setup_cors(app, settings)
