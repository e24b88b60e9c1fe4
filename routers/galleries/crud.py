"""
Gallery Maintenance Operations

Endpoints:
- PUT /{album_code}/photos  - Replace the photo list (resets indexing)
- DELETE /{album_code}      - Delete gallery and its face collection
"""

from fastapi import APIRouter

from core.responses import ApiResponse
from core.logging import get_logger
from models.domain.gallery import Photo

from .models import PhotosReplaceRequest
from .helpers import get_gallery_service, status_response

logger = get_logger(__name__)
router = APIRouter()


@router.put("/{album_code}/photos")
async def replace_photos(album_code: str, data: PhotosReplaceRequest):
    """Replace all photos. 409 while indexing is in progress."""
    photos = [Photo(url=p.url, alt=p.alt) for p in data.photos]
    gallery = await get_gallery_service().replace_photos(album_code, photos)
    return ApiResponse.ok({
        "albumCode": gallery.album_code,
        "photoCount": gallery.photo_count,
        "faceIndexing": status_response(gallery.face_indexing),
    }).model_dump()


@router.delete("/{album_code}")
async def delete_gallery(album_code: str):
    collection_deleted = await get_gallery_service().delete_gallery(album_code)
    return ApiResponse.ok({"deleted": True, "collectionDeleted": collection_deleted}).model_dump()
