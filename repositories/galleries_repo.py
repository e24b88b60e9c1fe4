"""
Galleries repository - customer_galleries table.

The face indexing sub-document is stored as flat face_indexing_* columns.
Every indexing write is a partial update of those columns only, so admin
edits to unrelated gallery fields are never clobbered.
"""

from typing import Optional, List, Dict, Any
from datetime import datetime, timezone

from repositories.base import BaseRepository
from models.domain.gallery import (
    Gallery,
    GalleryStatus,
    Photo,
    FaceIndexingState,
    IndexingStatus,
    normalize_album_code,
)
from core.config import settings
from core.exceptions import GalleryNotFoundError
from core.logging import get_logger

logger = get_logger(__name__)

CUSTOMER_VISIBLE_STATUSES = [GalleryStatus.PUBLISHED.value, GalleryStatus.DRAFT.value]

MIGRATION_COLUMNS = "id, album_code, global_favorites"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GalleriesRepository(BaseRepository):
    """
    Repository for customer_galleries table.
    """

    table_name = "customer_galleries"
    model_class = Gallery

    def __init__(self, supabase_client, table_name: str = None):
        super().__init__(supabase_client, table_name or settings.galleries_table)

    # ============================================================
    # Query Methods
    # ============================================================

    async def get_by_album_code(
        self,
        album_code: str,
        active_only: bool = False
    ) -> Optional[Gallery]:
        """
        Get gallery by album code.

        Args:
            album_code: Album code (any case)
            active_only: Only match active published/draft galleries
                (what customer-facing endpoints may see)
        """
        try:
            query = self.table.select("*").eq("album_code", normalize_album_code(album_code))
            if active_only:
                query = query.eq("is_active", True).in_("status", CUSTOMER_VISIBLE_STATUSES)

            response = query.limit(1).execute()

            if not response.data:
                return None

            return self._to_model(response.data[0])

        except Exception as e:
            self._handle_error("get_by_album_code", e)

    async def get_by_album_code_or_raise(
        self,
        album_code: str,
        active_only: bool = False
    ) -> Gallery:
        gallery = await self.get_by_album_code(album_code, active_only=active_only)
        if gallery is None:
            raise GalleryNotFoundError(album_code)
        return gallery

    # ============================================================
    # Face Indexing State
    # ============================================================

    async def try_start_indexing(
        self,
        gallery_id: str,
        run_id: str,
        total_photos: int,
        stale_before: datetime
    ) -> bool:
        """
        Compare-and-set the indexing status to in_progress.

        Matches only when the current status is not in_progress, or is an
        in_progress run whose last flush is older than stale_before.

        Returns:
            True if this call acquired the run
        """
        now = utc_now().isoformat()
        cutoff = stale_before.isoformat()
        try:
            response = (
                self.table
                .update({
                    "face_indexing_status": IndexingStatus.IN_PROGRESS.value,
                    "face_indexing_indexed_photos": 0,
                    "face_indexing_total_photos": total_photos,
                    "face_indexing_error_message": "",
                    "face_indexing_run_id": run_id,
                    "face_indexing_updated_at": now,
                })
                .eq("id", gallery_id)
                .or_(
                    "face_indexing_status.is.null,"
                    f"face_indexing_status.neq.{IndexingStatus.IN_PROGRESS.value},"
                    "face_indexing_updated_at.is.null,"
                    f'face_indexing_updated_at.lt."{cutoff}"'
                )
                .execute()
            )
            return bool(response.data)

        except Exception as e:
            self._handle_error("try_start_indexing", e)

    async def update_indexing_progress(
        self,
        gallery_id: str,
        run_id: str,
        indexed_photos: int
    ) -> bool:
        """
        Flush the indexed counter of a live run.
        No-op once the run was stopped or superseded.
        """
        try:
            response = (
                self.table
                .update({
                    "face_indexing_indexed_photos": indexed_photos,
                    "face_indexing_updated_at": utc_now().isoformat(),
                })
                .eq("id", gallery_id)
                .eq("face_indexing_run_id", run_id)
                .eq("face_indexing_status", IndexingStatus.IN_PROGRESS.value)
                .execute()
            )
            return bool(response.data)

        except Exception as e:
            self._handle_error("update_indexing_progress", e)

    async def finish_indexing(
        self,
        gallery_id: str,
        run_id: str,
        status: IndexingStatus,
        indexed_photos: Optional[int] = None,
        total_photos: Optional[int] = None,
        error_message: str = ""
    ) -> bool:
        """
        Move a live run to a terminal status (completed/error).
        Conditional on run_id so a stop that already landed wins.
        """
        now = utc_now().isoformat()
        data: Dict[str, Any] = {
            "face_indexing_status": status.value,
            "face_indexing_error_message": error_message,
            "face_indexing_last_indexed_at": now,
            "face_indexing_updated_at": now,
        }
        if indexed_photos is not None:
            data["face_indexing_indexed_photos"] = indexed_photos
        if total_photos is not None:
            data["face_indexing_total_photos"] = total_photos

        try:
            response = (
                self.table
                .update(data)
                .eq("id", gallery_id)
                .eq("face_indexing_run_id", run_id)
                .eq("face_indexing_status", IndexingStatus.IN_PROGRESS.value)
                .execute()
            )
            return bool(response.data)

        except Exception as e:
            self._handle_error("finish_indexing", e)

    async def mark_indexing_stopped(self, gallery_id: str, message: str) -> None:
        """Unconditionally persist status=stopped (stop is authoritative)."""
        now = utc_now().isoformat()
        try:
            self.table.update({
                "face_indexing_status": IndexingStatus.STOPPED.value,
                "face_indexing_error_message": message,
                "face_indexing_last_indexed_at": now,
                "face_indexing_updated_at": now,
            }).eq("id", gallery_id).execute()

        except Exception as e:
            self._handle_error("mark_indexing_stopped", e)

    async def mark_indexing_stale(
        self,
        gallery_id: str,
        run_id: Optional[str],
        message: str
    ) -> bool:
        """Flip an abandoned in_progress run to error."""
        try:
            query = (
                self.table
                .update({
                    "face_indexing_status": IndexingStatus.ERROR.value,
                    "face_indexing_error_message": message,
                    "face_indexing_updated_at": utc_now().isoformat(),
                })
                .eq("id", gallery_id)
                .eq("face_indexing_status", IndexingStatus.IN_PROGRESS.value)
            )
            if run_id:
                query = query.eq("face_indexing_run_id", run_id)
            else:
                query = query.is_("face_indexing_run_id", "null")

            response = query.execute()
            return bool(response.data)

        except Exception as e:
            self._handle_error("mark_indexing_stale", e)

    # ============================================================
    # Photos / Favorites
    # ============================================================

    async def replace_photos(self, gallery_id: str, photos: List[Photo]) -> Optional[Gallery]:
        """
        Replace the photo list wholesale and reset indexing to not_started.

        Returns:
            Updated gallery, or None if a run is in progress
        """
        try:
            response = (
                self.table
                .update({
                    "photos": [photo.model_dump() for photo in photos],
                    "face_indexing_status": IndexingStatus.NOT_STARTED.value,
                    "face_indexing_indexed_photos": 0,
                    "face_indexing_total_photos": 0,
                    "face_indexing_error_message": "",
                    "face_indexing_run_id": None,
                    "face_indexing_updated_at": utc_now().isoformat(),
                })
                .eq("id", gallery_id)
                .or_(
                    "face_indexing_status.is.null,"
                    f"face_indexing_status.neq.{IndexingStatus.IN_PROGRESS.value}"
                )
                .execute()
            )
            if not response.data:
                return None
            return self._to_model(response.data[0])

        except Exception as e:
            self._handle_error("replace_photos", e)

    async def set_global_favorites(self, gallery_id: str, positions: List[int]) -> None:
        try:
            self.table.update({
                "global_favorites": sorted(set(positions))
            }).eq("id", gallery_id).execute()

        except Exception as e:
            self._handle_error("set_global_favorites", e)

    async def list_missing_global_favorites(self) -> List[Dict]:
        """Galleries that never had a global_favorites value (SQL NULL)."""
        return await self.client.paginated_query(
            self.table_name,
            columns=MIGRATION_COLUMNS,
            filters={"global_favorites": None},
            order_by="id"
        )

    async def list_null_global_favorites(self) -> List[Dict]:
        """Galleries whose global_favorites is present but a JSON null."""
        try:
            response = (
                self.table
                .select(MIGRATION_COLUMNS)
                .eq("global_favorites", "null")
                .execute()
            )
            return response.data or []

        except Exception as e:
            self._handle_error("list_null_global_favorites", e)

    async def count_missing_global_favorites(self) -> int:
        return await self.count({"global_favorites": None})

    async def count_null_global_favorites(self) -> int:
        try:
            response = (
                self.table
                .select("id", count="exact")
                .eq("global_favorites", "null")
                .execute()
            )
            return response.count or 0

        except Exception as e:
            self._handle_error("count_null_global_favorites", e)

    # ============================================================
    # Model Conversion
    # ============================================================

    def _to_model(self, data: Dict) -> Gallery:
        """Convert database row to Gallery model."""
        photos = [
            Photo(url=p.get("url", ""), alt=p.get("alt") or "")
            for p in (data.get("photos") or [])
            if isinstance(p, dict)
        ]
        return Gallery(
            id=str(data["id"]),
            album_code=data.get("album_code", ""),
            customer_name=data.get("customer_name") or "",
            event_type=data.get("event_type") or "",
            status=GalleryStatus(data.get("status") or "draft"),
            is_active=data.get("is_active", True),
            face_recognition_enabled=bool(data.get("face_recognition_enabled", False)),
            photos=photos,
            global_favorites=data.get("global_favorites"),
            face_indexing=FaceIndexingState(
                status=IndexingStatus(data.get("face_indexing_status") or "not_started"),
                indexed_photos=data.get("face_indexing_indexed_photos") or 0,
                total_photos=data.get("face_indexing_total_photos") or 0,
                last_indexed_at=data.get("face_indexing_last_indexed_at"),
                updated_at=data.get("face_indexing_updated_at"),
                error_message=data.get("face_indexing_error_message") or "",
                run_id=data.get("face_indexing_run_id"),
            ),
        )
