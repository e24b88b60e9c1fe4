"""
Customer Gallery Delivery API - Main Entry Point

This is the FastAPI application entry point.
Uses core/ for configuration, exceptions, and logging.
"""

from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

# Core imports
from core.config import settings, VERSION
from core.exceptions import AppException
from core.responses import ApiResponse
from core.logging import setup_logging, get_logger

# Setup logging first
setup_logging(level="INFO" if not settings.debug else "DEBUG")
logger = get_logger(__name__)

# Infrastructure / repositories / services
from infrastructure import SupabaseClient, PhotoFetcher, get_rekognition_client
from repositories import GalleriesRepository, LegacyFavoritesRepository
from services import (
    ArchiveBuilder,
    FaceCollectionService,
    FaceSearchService,
    FavoritesMigrationService,
    GalleryService,
    IndexingService,
)

# Router imports
from routers import galleries, admin


# ============================================================
# Service Initialization (Dependency Injection)
# ============================================================

def create_services() -> dict:
    """Create singleton service instances and inject them into routers."""
    logger.info("Creating singleton service instances...")

    # 1. Clients
    supabase_client = SupabaseClient()
    fetcher = PhotoFetcher()
    face_collections = FaceCollectionService(get_rekognition_client())
    logger.info("✓ Created SupabaseClient, PhotoFetcher and FaceCollectionService")

    # 2. Repositories
    galleries_repo = GalleriesRepository(supabase_client)
    legacy_favorites_repo = LegacyFavoritesRepository(supabase_client)

    # 3. Services
    indexing_service = IndexingService(galleries_repo, face_collections, fetcher)
    services = {
        "indexing": indexing_service,
        "search": FaceSearchService(galleries_repo, face_collections),
        "gallery": GalleryService(galleries_repo, face_collections, indexing_service),
        "archive": ArchiveBuilder(fetcher),
        "migration": FavoritesMigrationService(galleries_repo, legacy_favorites_repo),
    }
    logger.info("✓ Created gallery services")

    # 4. Inject services into routers
    galleries.set_services(
        services["indexing"],
        services["search"],
        services["gallery"],
        services["archive"],
        galleries_repo,
    )
    admin.set_services(services["migration"], face_collections)
    logger.info("✓ Service instances injected into all routers")

    return services


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting Customer Gallery API v{VERSION}")
    services = create_services()
    logger.info(f"Application startup complete. Running on {settings.server_host}:{settings.server_port}")
    yield
    await services["indexing"].shutdown()
    logger.info("Application shutdown complete")


# ============================================================
# Application Setup
# ============================================================

app = FastAPI(
    title="Customer Gallery Delivery API",
    description="Face indexing, selfie search and archive downloads for customer galleries",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# ============================================================
# CORS Configuration
# ============================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
    max_age=3600,
)

# ============================================================
# Global Exception Handlers
# ============================================================

@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """
    Handle all custom AppException and subclasses.
    Returns unified ApiResponse format.
    """
    logger.warning(f"AppException: {exc.code} - {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ApiResponse.from_exception(exc).model_dump()
    )

@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """
    Handle unexpected exceptions.
    Logs full traceback and returns generic error.
    """
    logger.error(f"Unhandled exception: {type(exc).__name__}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ApiResponse.fail(
            message="Internal server error",
            code="INTERNAL_ERROR"
        ).model_dump()
    )

# ============================================================
# Root Endpoints
# ============================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return ApiResponse.ok({
        "status": "healthy",
        "service": "customer-gallery",
        "version": VERSION,
    }).model_dump()

# ============================================================
# Router Registration
# ============================================================

app.include_router(galleries.router, prefix="/galleries", tags=["galleries"])
app.include_router(admin.router, prefix="/admin", tags=["admin"])

# ============================================================
# Entry Point
# ============================================================

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug
    )
