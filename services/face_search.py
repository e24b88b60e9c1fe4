"""
Selfie search: probe a gallery's face collection and map hits to photos.
"""

import asyncio
from typing import List, Optional

from pydantic import BaseModel, Field

from core.config import settings
from core.exceptions import CollectionNotFoundError
from core.logging import get_logger
from models.domain.face import FaceMatch, PhotoMatch
from models.domain.gallery import Gallery, Photo
from services.face_collection import collection_id_for

logger = get_logger(__name__)


class SearchResult(BaseModel):
    total_photos: int
    matches: List[PhotoMatch] = Field(default_factory=list)
    message: str = ""


def map_matches_to_photos(matches: List[FaceMatch], photos: List[Photo]) -> List[PhotoMatch]:
    """
    Decode "photo-<position>" keys back to photos.

    Keys that do not decode, or decode past the end of the current photo
    list, are dropped. Repeated positions keep their first (best) match.
    """
    mapped: List[PhotoMatch] = []
    seen = set()

    for match in matches:
        position = match.face.position
        if position is None or position >= len(photos):
            logger.debug(f"[Search] Dropping hit {match.external_key!r}")
            continue
        if position in seen:
            continue
        seen.add(position)

        photo = photos[position]
        mapped.append(PhotoMatch(
            index=position,
            url=photo.url,
            alt=photo.alt or f"Photo {position + 1}",
            confidence=match.similarity,
            face_id=match.face.face_id,
        ))

    return mapped


def result_message(count: int) -> str:
    return f"Found {count} photos with your face!"


class FaceSearchService:
    """Customer-facing face search over one gallery."""

    def __init__(self, galleries_repo, face_collections):
        self.galleries = galleries_repo
        self.face_collections = face_collections

    async def search_by_selfie(
        self,
        album_code: str,
        probe_bytes: bytes,
        threshold: Optional[float] = None,
        max_results: Optional[int] = None
    ) -> SearchResult:
        """
        Raises:
            GalleryNotFoundError: unknown or hidden gallery
            NoFaceInProbeError: no face in the selfie
            UpstreamUnavailableError: face service unavailable
        """
        gallery: Gallery = await self.galleries.get_by_album_code_or_raise(
            album_code, active_only=True
        )
        threshold = settings.search_similarity_threshold if threshold is None else threshold
        max_results = max_results or settings.search_max_results
        collection_id = collection_id_for(gallery.album_code)

        try:
            matches = await asyncio.to_thread(
                self.face_collections.search,
                collection_id,
                probe_bytes,
                max_results,
                threshold,
            )
        except CollectionNotFoundError:
            logger.info(f"[Search] Gallery {gallery.album_code} has not been indexed")
            return SearchResult(
                total_photos=gallery.photo_count,
                message="This gallery has not been prepared for face search yet",
            )

        photos = map_matches_to_photos(matches, gallery.photos)
        logger.info(
            f"[Search] {gallery.album_code}: {len(matches)} raw hits -> {len(photos)} photos"
        )
        return SearchResult(
            total_photos=gallery.photo_count,
            matches=photos,
            message=result_message(len(photos)),
        )
