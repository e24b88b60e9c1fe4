"""
Shared Favorites Endpoints

Endpoints:
- GET /{album_code}/favorites   - Sorted favorite positions
- POST /{album_code}/favorites  - Toggle one position
"""

from fastapi import APIRouter

from .models import FavoriteToggleRequest, FavoriteToggleResponse
from .helpers import get_gallery_service

router = APIRouter()


@router.get("/{album_code}/favorites")
async def get_favorites(album_code: str):
    favorites = await get_gallery_service().get_favorites(album_code)
    return {"favorites": favorites}


@router.post("/{album_code}/favorites")
async def toggle_favorite(album_code: str, data: FavoriteToggleRequest):
    action, favorites = await get_gallery_service().toggle_favorite(album_code, data.photo_index)
    return FavoriteToggleResponse(
        message=f"Favorite {action}",
        action=action,
        favorites=favorites,
    ).to_response()
