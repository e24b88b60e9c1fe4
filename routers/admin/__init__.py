"""
Admin Router Package - Administrative endpoints

Sub-routers:
- favorites_migration.py - Legacy favorites consolidation
- collections.py - Face collection listing
"""

from fastapi import APIRouter

from services.favorites_migration import FavoritesMigrationService
from services.face_collection import FaceCollectionService
from core.logging import get_logger

logger = get_logger(__name__)

# Global service instances (set via set_services)
migration_service_instance: FavoritesMigrationService = None
face_collections_instance: FaceCollectionService = None


def set_services(
    migration_service: FavoritesMigrationService,
    face_collections: FaceCollectionService = None
):
    """Set service instances for dependency injection."""
    global migration_service_instance, face_collections_instance
    migration_service_instance = migration_service
    face_collections_instance = face_collections
    logger.info("Admin router services initialized")


# Create main router
router = APIRouter()

# Import sub-routers AFTER globals are defined
from .favorites_migration import router as favorites_migration_router
from .collections import router as collections_router

# Include all sub-routers
router.include_router(favorites_migration_router)
router.include_router(collections_router)

# Export for main.py
__all__ = ["router", "set_services"]
