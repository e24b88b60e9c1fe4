"""
GalleryService - shared favorites and the gallery lifecycle hooks that
keep face indexing consistent (photo replacement, deletion).
"""

import asyncio
from typing import List, Tuple

from core.exceptions import (
    IndexingAlreadyRunningError,
    UpstreamUnavailableError,
    ValidationError,
)
from core.logging import get_logger
from models.domain.gallery import Gallery, Photo
from services.face_collection import collection_id_for

logger = get_logger(__name__)


class GalleryService:

    def __init__(self, galleries_repo, face_collections, indexing_service):
        """
        Args:
            galleries_repo: GalleriesRepository
            face_collections: FaceCollectionService
            indexing_service: IndexingService (live runs are cancelled on delete)
        """
        self.galleries = galleries_repo
        self.face_collections = face_collections
        self.indexing = indexing_service

    # ==================== Favorites ====================

    async def get_favorites(self, album_code: str) -> List[int]:
        gallery = await self.galleries.get_by_album_code_or_raise(album_code, active_only=True)
        return gallery.sorted_favorites()

    async def toggle_favorite(self, album_code: str, position: int) -> Tuple[str, List[int]]:
        """
        Add or remove one position from the gallery's shared favorites.

        Returns:
            ("added" | "removed", sorted favorites)
        """
        gallery = await self.galleries.get_by_album_code_or_raise(album_code, active_only=True)
        if gallery.photo_at(position) is None:
            raise ValidationError(f"Invalid photo index: {position}", field="photoIndex")

        favorites = set(gallery.global_favorites or [])
        if position in favorites:
            favorites.discard(position)
            action = "removed"
        else:
            favorites.add(position)
            action = "added"

        updated = sorted(favorites)
        await self.galleries.set_global_favorites(gallery.id, updated)
        logger.info(f"[Favorites] {gallery.album_code}: photo {position} {action}")
        return action, updated

    # ==================== Lifecycle ====================

    async def replace_photos(self, album_code: str, photos: List[Photo]) -> Gallery:
        """
        Replace the photo list and reset indexing to not_started.

        Raises:
            IndexingAlreadyRunningError: positions must not move under a live run
        """
        gallery = await self.galleries.get_by_album_code_or_raise(album_code)
        if gallery.face_indexing.is_running:
            raise IndexingAlreadyRunningError(gallery.album_code)

        updated = await self.galleries.replace_photos(gallery.id, photos)
        if updated is None:
            raise IndexingAlreadyRunningError(gallery.album_code)

        logger.info(f"[Gallery] Replaced photos of {gallery.album_code}: {len(photos)} photos")
        return updated

    async def delete_gallery(self, album_code: str) -> bool:
        """
        Delete the gallery record, then its face collection.

        Returns:
            True if the collection was deleted too
        """
        gallery = await self.galleries.get_by_album_code_or_raise(album_code)

        await self.indexing.forget(gallery.album_code)
        await self.galleries.delete(gallery.id)
        logger.info(f"[Gallery] Deleted {gallery.album_code}")

        collection_id = collection_id_for(gallery.album_code)
        try:
            return await asyncio.to_thread(self.face_collections.delete_collection, collection_id)
        except UpstreamUnavailableError as e:
            logger.warning(f"[Gallery] Could not delete collection {collection_id}: {e.message}")
            return False
