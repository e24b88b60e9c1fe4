"""
Favorites Migration Endpoints

Endpoints:
- POST /favorites-migration  - Consolidate legacy favorites
- GET /favorites-migration   - Migration progress
"""

from fastapi import APIRouter

from core.logging import get_logger

from .helpers import get_migration_service

logger = get_logger(__name__)
router = APIRouter()


@router.post("/favorites-migration")
async def run_favorites_migration():
    """Pool per-client favorites into each gallery. Safe to repeat."""
    result = await get_migration_service().migrate()
    return {
        "success": True,
        "message": result.message,
        "galleriesMigrated": result.galleries_migrated,
    }


@router.get("/favorites-migration")
async def get_favorites_migration_status():
    status = await get_migration_service().get_status()
    return status.to_response()
