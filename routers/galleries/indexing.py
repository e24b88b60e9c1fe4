"""
Face Indexing Endpoints

Endpoints:
- POST /{album_code}/indexing    - Start a run (202)
- GET /{album_code}/indexing     - Persisted status snapshot
- DELETE /{album_code}/indexing  - Stop the run
"""

from fastapi import APIRouter

from core.logging import get_logger

from .models import IndexingStartResponse
from .helpers import get_indexing_service, status_response

logger = get_logger(__name__)
router = APIRouter()


@router.post("/{album_code}/indexing", status_code=202)
async def start_indexing(album_code: str):
    """Start face indexing in the background.

    409 while a run is in progress, 400 when the gallery is not eligible.
    """
    state = await get_indexing_service().start_indexing(album_code)
    return IndexingStartResponse(
        status=state.status.value,
        progress=state.progress,
        total_photos=state.total_photos,
    ).to_response()


@router.get("/{album_code}/indexing")
async def get_indexing_status(album_code: str):
    state = await get_indexing_service().get_status(album_code)
    return status_response(state)


@router.delete("/{album_code}/indexing")
async def stop_indexing(album_code: str):
    """Stop indexing. Always reports stopped for a known gallery."""
    state = await get_indexing_service().stop_indexing(album_code)
    return {"status": state.status.value}
