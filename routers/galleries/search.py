"""
Selfie Search Endpoint

Endpoints:
- POST /{album_code}/search - multipart "selfie" file
"""

from typing import Optional

from fastapi import APIRouter, File, Query, UploadFile

from core.exceptions import ValidationError
from core.logging import get_logger

from .models import SearchMatch, SearchResponse
from .helpers import get_search_service

logger = get_logger(__name__)
router = APIRouter()


@router.post("/{album_code}/search")
async def search_by_selfie(
    album_code: str,
    selfie: Optional[UploadFile] = File(None),
    threshold: Optional[float] = Query(None, ge=0, le=100)
):
    """Find the gallery photos that contain the submitted face.

    Args:
        album_code: Gallery album code
        selfie: Probe image
        threshold: Similarity threshold in percent (defaults to settings)
    """
    if selfie is None:
        raise ValidationError("No selfie file provided", field="selfie")

    probe_bytes = await selfie.read()
    if not probe_bytes:
        raise ValidationError("Selfie file is empty", field="selfie")

    result = await get_search_service().search_by_selfie(
        album_code, probe_bytes, threshold=threshold
    )

    return SearchResponse(
        total_photos=result.total_photos,
        matched_photos=len(result.matches),
        matches=[
            SearchMatch(index=m.index, url=m.url, alt=m.alt, confidence=m.confidence)
            for m in result.matches
        ],
        message=result.message,
    ).to_response()
