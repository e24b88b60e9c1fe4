"""
In-memory stand-ins for the Supabase repositories, the face collection
client and the photo fetcher.
"""

import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

from core.exceptions import (
    CollectionNotFoundError,
    EnrollmentError,
    GalleryNotFoundError,
    PhotoFetchError,
    UpstreamUnavailableError,
)
from models.domain.face import FaceMatch, FaceRecord
from models.domain.gallery import (
    FaceIndexingState,
    Gallery,
    GalleryStatus,
    IndexingStatus,
    Photo,
    normalize_album_code,
)

MISSING = object()


def make_gallery(
    album_code: str = "abc123",
    photo_count: int = 3,
    face_recognition_enabled: bool = True,
    gallery_id: Optional[str] = None,
    **overrides
) -> Gallery:
    photos = [
        Photo(url=f"https://photos.example.com/{album_code}/{i}.jpg", alt=f"Shot {i}")
        for i in range(photo_count)
    ]
    data = dict(
        id=gallery_id or f"id-{album_code}",
        album_code=album_code,
        customer_name="Jane Doe",
        event_type="Wedding",
        status=GalleryStatus.PUBLISHED,
        is_active=True,
        face_recognition_enabled=face_recognition_enabled,
        photos=photos,
    )
    data.update(overrides)
    return Gallery(**data)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryGalleriesRepository:
    """Mirrors GalleriesRepository's conditional-update semantics."""

    def __init__(self, galleries: List[Gallery] = None):
        self.galleries: Dict[str, Gallery] = {}
        # gallery id -> MISSING (SQL NULL), None (JSON null) or list
        self.favorites: Dict[str, object] = {}
        self.progress_history: Dict[str, List[int]] = {}
        for gallery in galleries or []:
            self.add(gallery)

    def add(self, gallery: Gallery, favorites=MISSING) -> Gallery:
        self.galleries[gallery.id] = gallery
        if favorites is MISSING and gallery.global_favorites is not None:
            favorites = list(gallery.global_favorites)
        self.favorites[gallery.id] = favorites
        return gallery

    def get(self, album_code: str) -> Gallery:
        code = normalize_album_code(album_code)
        for gallery in self.galleries.values():
            if gallery.album_code == code:
                return self._with_favorites(gallery)
        raise KeyError(album_code)

    def state(self, album_code: str) -> FaceIndexingState:
        return self.get(album_code).face_indexing

    def _with_favorites(self, gallery: Gallery) -> Gallery:
        value = self.favorites.get(gallery.id, MISSING)
        favorites = value if isinstance(value, list) else None
        return gallery.model_copy(update={"global_favorites": favorites})

    def _update_indexing(self, gallery_id: str, **changes):
        gallery = self.galleries[gallery_id]
        state = gallery.face_indexing.model_copy(update=changes)
        self.galleries[gallery_id] = gallery.model_copy(update={"face_indexing": state})

    # Query

    async def get_by_album_code(self, album_code: str, active_only: bool = False) -> Optional[Gallery]:
        code = normalize_album_code(album_code)
        for gallery in self.galleries.values():
            if gallery.album_code != code:
                continue
            if active_only and (
                not gallery.is_active
                or gallery.status not in (GalleryStatus.PUBLISHED, GalleryStatus.DRAFT)
            ):
                continue
            return self._with_favorites(gallery)
        return None

    async def get_by_album_code_or_raise(self, album_code: str, active_only: bool = False) -> Gallery:
        gallery = await self.get_by_album_code(album_code, active_only=active_only)
        if gallery is None:
            raise GalleryNotFoundError(album_code)
        return gallery

    async def count(self, filters=None) -> int:
        return len(self.galleries)

    async def delete(self, id: str) -> bool:
        existed = self.galleries.pop(id, None) is not None
        self.favorites.pop(id, None)
        return existed

    # Indexing state

    async def try_start_indexing(self, gallery_id, run_id, total_photos, stale_before) -> bool:
        state = self.galleries[gallery_id].face_indexing
        if (
            state.status == IndexingStatus.IN_PROGRESS
            and state.updated_at is not None
            and state.updated_at >= stale_before
        ):
            return False
        self._update_indexing(
            gallery_id,
            status=IndexingStatus.IN_PROGRESS,
            indexed_photos=0,
            total_photos=total_photos,
            error_message="",
            run_id=run_id,
            updated_at=utc_now(),
        )
        self.progress_history[gallery_id] = []
        return True

    def _is_live(self, gallery_id: str, run_id: str) -> bool:
        state = self.galleries[gallery_id].face_indexing
        return state.run_id == run_id and state.status == IndexingStatus.IN_PROGRESS

    async def update_indexing_progress(self, gallery_id, run_id, indexed_photos) -> bool:
        if gallery_id not in self.galleries or not self._is_live(gallery_id, run_id):
            return False
        self._update_indexing(gallery_id, indexed_photos=indexed_photos, updated_at=utc_now())
        self.progress_history.setdefault(gallery_id, []).append(indexed_photos)
        return True

    async def finish_indexing(
        self,
        gallery_id,
        run_id,
        status,
        indexed_photos=None,
        total_photos=None,
        error_message=""
    ) -> bool:
        if gallery_id not in self.galleries or not self._is_live(gallery_id, run_id):
            return False
        now = utc_now()
        changes = dict(
            status=status,
            error_message=error_message,
            last_indexed_at=now,
            updated_at=now,
        )
        if indexed_photos is not None:
            changes["indexed_photos"] = indexed_photos
        if total_photos is not None:
            changes["total_photos"] = total_photos
        self._update_indexing(gallery_id, **changes)
        return True

    async def mark_indexing_stopped(self, gallery_id, message) -> None:
        now = utc_now()
        self._update_indexing(
            gallery_id,
            status=IndexingStatus.STOPPED,
            error_message=message,
            last_indexed_at=now,
            updated_at=now,
        )

    async def mark_indexing_stale(self, gallery_id, run_id, message) -> bool:
        state = self.galleries[gallery_id].face_indexing
        if state.status != IndexingStatus.IN_PROGRESS or state.run_id != run_id:
            return False
        self._update_indexing(
            gallery_id,
            status=IndexingStatus.ERROR,
            error_message=message,
            updated_at=utc_now(),
        )
        return True

    # Photos / favorites

    async def replace_photos(self, gallery_id, photos) -> Optional[Gallery]:
        gallery = self.galleries[gallery_id]
        if gallery.face_indexing.status == IndexingStatus.IN_PROGRESS:
            return None
        self.galleries[gallery_id] = gallery.model_copy(update={
            "photos": list(photos),
            "face_indexing": FaceIndexingState(updated_at=utc_now()),
        })
        return self._with_favorites(self.galleries[gallery_id])

    async def set_global_favorites(self, gallery_id, positions) -> None:
        self.favorites[gallery_id] = sorted(set(positions))

    def _rows(self, predicate) -> List[Dict]:
        return [
            {"id": g.id, "album_code": g.album_code, "global_favorites": self.favorites.get(g.id)}
            for g in self.galleries.values()
            if predicate(self.favorites.get(g.id, MISSING))
        ]

    async def list_missing_global_favorites(self) -> List[Dict]:
        return self._rows(lambda value: value is MISSING)

    async def list_null_global_favorites(self) -> List[Dict]:
        return self._rows(lambda value: value is None)

    async def count_missing_global_favorites(self) -> int:
        return len(await self.list_missing_global_favorites())

    async def count_null_global_favorites(self) -> int:
        return len(await self.list_null_global_favorites())


class InMemoryFavoritesRepository:

    def __init__(self, rows: Dict[str, List[int]] = None):
        self.rows = rows or {}

    async def list_positions(self, gallery_id: str) -> List[int]:
        return list(self.rows.get(gallery_id, []))


class FakeFaceCollections:
    """Synchronous like the boto3-backed client."""

    def __init__(
        self,
        fail_create: bool = False,
        fail_delete: bool = False,
        rejected_keys: Set[str] = None,
        crash_on_key: Optional[str] = None,
        no_face_keys: Set[str] = None,
        fail_enroll: bool = False,
        crash_on_create: bool = False
    ):
        self.collections: Set[str] = set()
        self.enrolled: Dict[str, List[str]] = {}
        self.search_results: List[FaceMatch] = []
        self.search_calls: List[dict] = []
        self.fail_create = fail_create
        self.fail_delete = fail_delete
        self.rejected_keys = rejected_keys or set()
        self.crash_on_key = crash_on_key
        self.no_face_keys = no_face_keys or set()
        self.fail_enroll = fail_enroll
        self.crash_on_create = crash_on_create

    def create_collection(self, collection_id: str) -> bool:
        if self.fail_create:
            raise UpstreamUnavailableError("Face recognition service unavailable", "create_collection")
        if self.crash_on_create:
            raise RuntimeError("unexpected failure")
        if collection_id in self.collections:
            return False
        self.collections.add(collection_id)
        return True

    def delete_collection(self, collection_id: str) -> bool:
        if self.fail_delete:
            raise UpstreamUnavailableError("Face recognition service unavailable", "delete_collection")
        if collection_id not in self.collections:
            return False
        self.collections.discard(collection_id)
        return True

    def list_collections(self) -> List[str]:
        return sorted(self.collections)

    def enroll(self, collection_id: str, image_bytes: bytes, external_key: str) -> int:
        if self.fail_enroll:
            raise UpstreamUnavailableError("Face recognition service unavailable", "index_faces")
        if external_key == self.crash_on_key:
            raise RuntimeError("unexpected failure")
        if external_key in self.rejected_keys:
            raise EnrollmentError(external_key, "InvalidImageFormatException")
        self.enrolled.setdefault(collection_id, []).append(external_key)
        return 0 if external_key in self.no_face_keys else 1

    def search(self, collection_id, probe_bytes, max_results=10, similarity_threshold=85.0):
        self.search_calls.append({
            "collection_id": collection_id,
            "max_results": max_results,
            "similarity_threshold": similarity_threshold,
        })
        if collection_id not in self.collections:
            raise CollectionNotFoundError(collection_id)
        return list(self.search_results)


def face_match(external_key: str, similarity: float, face_id: str = None) -> FaceMatch:
    return FaceMatch(
        face=FaceRecord(face_id=face_id or f"face-{external_key}", external_key=external_key),
        similarity=similarity,
    )


class FakePhotoFetcher:
    """URLs not in `contents` fail like an HTTP 404."""

    def __init__(self, contents: Dict[str, bytes] = None):
        self.contents = contents or {}
        self.requested: List[str] = []

    @classmethod
    def for_gallery(cls, gallery: Gallery, skip: Set[int] = frozenset()) -> "FakePhotoFetcher":
        return cls({
            photo.url: f"image-{position}".encode()
            for position, photo in enumerate(gallery.photos)
            if position not in skip
        })

    async def fetch(self, url: str) -> bytes:
        self.requested.append(url)
        if url not in self.contents:
            raise PhotoFetchError(url, "HTTP 404")
        return self.contents[url]

    async def fetch_or_none(self, url: str) -> Optional[bytes]:
        try:
            return await self.fetch(url)
        except PhotoFetchError:
            return None


class HangingFetcher(FakePhotoFetcher):
    """Never returns, keeping an indexing run in progress until cancelled."""

    async def fetch(self, url: str) -> bytes:
        self.requested.append(url)
        await asyncio.Event().wait()
        return b""
