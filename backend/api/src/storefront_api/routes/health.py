"""Health check endpoint."""

from typing import Any

from fastapi import APIRouter

from storefront_api import __version__

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check")
async def health() -> dict[str, Any]:
    """Report service health and version."""
    return {"status": "healthy", "version": __version__}
