"""
Galleries API Router Package
Customer gallery endpoints addressed by album code.

Sub-routers:
- indexing.py - Face indexing start/status/stop
- search.py - Selfie search
- download.py - .tar.gz downloads
- favorites.py - Shared favorites
- crud.py - Photo replacement and deletion
"""

from fastapi import APIRouter

from services.indexing_service import IndexingService
from services.face_search import FaceSearchService
from services.gallery_service import GalleryService
from services.archive import ArchiveBuilder
from core.logging import get_logger

logger = get_logger(__name__)

# Global service instances (set via set_services)
indexing_service_instance: IndexingService = None
search_service_instance: FaceSearchService = None
gallery_service_instance: GalleryService = None
archive_builder_instance: ArchiveBuilder = None
galleries_repo_instance = None


def set_services(
    indexing_service: IndexingService,
    search_service: FaceSearchService,
    gallery_service: GalleryService,
    archive_builder: ArchiveBuilder,
    galleries_repo
):
    """Set service instances for dependency injection."""
    global indexing_service_instance, search_service_instance, gallery_service_instance
    global archive_builder_instance, galleries_repo_instance
    indexing_service_instance = indexing_service
    search_service_instance = search_service
    gallery_service_instance = gallery_service
    archive_builder_instance = archive_builder
    galleries_repo_instance = galleries_repo
    logger.info("Galleries router services initialized")


# Create main router
router = APIRouter()

# Import sub-routers AFTER globals are defined (they reference them)
from .indexing import router as indexing_router
from .search import router as search_router
from .download import router as download_router
from .favorites import router as favorites_router
from .crud import router as crud_router

# Include all sub-routers
router.include_router(indexing_router)
router.include_router(search_router)
router.include_router(download_router)
router.include_router(favorites_router)
router.include_router(crud_router)

# Export for main.py
__all__ = ["router", "set_services"]
