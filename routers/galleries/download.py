"""
Gallery Download Endpoint

Endpoints:
- GET /{album_code}/download?type=full|favorites|face-matches
      &favorites=<csv>&faces=<csv>
"""

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import Response

from core.logging import get_logger
from services.archive import (
    SelectionMode,
    archive_filename,
    archive_items,
    parse_mode,
    select_photos,
)

from .helpers import get_archive_builder, get_galleries_repo

logger = get_logger(__name__)
router = APIRouter()


@router.get("/{album_code}/download")
async def download_gallery(
    album_code: str,
    type: Optional[str] = Query("full"),
    favorites: Optional[str] = Query(None),
    faces: Optional[str] = Query(None)
):
    """Package the selected photos of a gallery as .tar.gz.

    400 on an invalid selection (nothing is fetched), 404 on unknown
    gallery, 500 if no photo could be fetched.
    """
    mode = parse_mode(type)
    gallery = await get_galleries_repo().get_by_album_code_or_raise(album_code, active_only=True)

    raw_positions = favorites if mode == SelectionMode.FAVORITES else faces
    selected = select_photos(gallery, mode, raw_positions)

    logger.info(f"[Archive] {gallery.album_code}: {mode.value} download of {len(selected)} photos")
    result = await get_archive_builder().build(
        archive_items(selected, gallery.customer_name, gallery.event_type)
    )

    filename = archive_filename(gallery.customer_name, gallery.event_type, mode)
    return Response(
        content=result.content,
        media_type="application/gzip",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-cache",
        },
    )
