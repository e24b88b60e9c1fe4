"""
IndexingService - Facade for face indexing runs.

Start/status/stop per gallery. The persisted face_indexing_* columns are the
only source of truth; the background task keeps its counters locally and
flushes them after every photo.

Delegates to specialized modules in services/indexing/:
- pipeline.py - Fetch + enroll loop with progress callback
- state.py - Staleness check and status snapshots
"""

import asyncio
import uuid
from typing import Dict, Optional

from core.config import settings
from core.exceptions import (
    DatabaseError,
    IndexingAlreadyRunningError,
    NotEligibleError,
)
from core.logging import get_logger, log_error
from models.domain.gallery import (
    FaceIndexingState,
    Gallery,
    IndexingStatus,
    normalize_album_code,
)
from services.face_collection import collection_id_for
from services.indexing import (
    STOP_MESSAGE,
    IndexingProgress,
    is_stale,
    run_indexing_pipeline,
    stale_cutoff,
    stale_message,
    started_state,
    stopped_state,
)

logger = get_logger(__name__)


class IndexingService:
    """
    Supervises one background indexing task per gallery.

    The compare-and-set on the persisted status is the lock; the in-memory
    task registry only exists so stop can cancel a live task in this process.
    """

    def __init__(
        self,
        galleries_repo,
        face_collections,
        fetcher,
        stale_after_minutes: int = None
    ):
        """
        Args:
            galleries_repo: GalleriesRepository
            face_collections: FaceCollectionService
            fetcher: PhotoFetcher
            stale_after_minutes: In-progress runs without a flush for this long are abandoned
        """
        self.galleries = galleries_repo
        self.face_collections = face_collections
        self.fetcher = fetcher
        self.stale_after_minutes = (
            stale_after_minutes if stale_after_minutes is not None
            else settings.indexing_stale_minutes
        )
        self._tasks: Dict[str, asyncio.Task] = {}
        logger.info("[Indexing] IndexingService initialized")

    # ==================== Task registry ====================

    def get_running_task(self, album_code: str) -> Optional[asyncio.Task]:
        """Live background task for a gallery in this process, if any."""
        task = self._tasks.get(normalize_album_code(album_code))
        if task is None or task.done():
            return None
        return task

    async def shutdown(self):
        """Cancel every live run. Their persisted status is left for the staleness check."""
        tasks = [task for task in self._tasks.values() if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info(f"[Indexing] Cancelled {len(tasks)} run(s) on shutdown")
        self._tasks.clear()

    # ==================== Operations ====================

    async def start_indexing(self, album_code: str) -> FaceIndexingState:
        """
        Accept a new run and schedule it in the background.

        Raises:
            GalleryNotFoundError: unknown album code
            NotEligibleError: face recognition disabled or no photos
            IndexingAlreadyRunningError: a live run holds the gallery
            UpstreamUnavailableError: face collection could not be created
        """
        gallery = await self.galleries.get_by_album_code_or_raise(album_code)
        code = normalize_album_code(gallery.album_code)

        if self.get_running_task(code) is not None:
            raise IndexingAlreadyRunningError(code)
        if gallery.face_indexing.is_running and not is_stale(
            gallery.face_indexing, self.stale_after_minutes
        ):
            raise IndexingAlreadyRunningError(code)

        if not gallery.face_recognition_enabled:
            raise NotEligibleError("Face recognition is disabled for this gallery")
        if not gallery.photos:
            raise NotEligibleError("Gallery has no photos to index")

        run_id = uuid.uuid4().hex
        acquired = await self.galleries.try_start_indexing(
            gallery.id,
            run_id,
            total_photos=gallery.photo_count,
            stale_before=stale_cutoff(self.stale_after_minutes),
        )
        if not acquired:
            raise IndexingAlreadyRunningError(code)

        if gallery.face_indexing.is_running:
            logger.warning(f"[Indexing] Took over stale run for {code}")

        collection_id = collection_id_for(code)
        try:
            await asyncio.to_thread(self.face_collections.create_collection, collection_id)
        except Exception as e:
            log_error(logger, e, f"Indexing start {code}")
            await self.galleries.finish_indexing(
                gallery.id,
                run_id,
                IndexingStatus.ERROR,
                indexed_photos=0,
                error_message=getattr(e, "message", None) or str(e),
            )
            raise

        task = asyncio.create_task(
            self._run(gallery, run_id, collection_id),
            name=f"face-indexing-{code}",
        )
        self._tasks[code] = task

        logger.info(f"[Indexing] Started run {run_id} for {code} ({gallery.photo_count} photos)")
        return started_state(gallery.photo_count)

    async def get_status(self, album_code: str) -> FaceIndexingState:
        """
        Last persisted snapshot.

        An in_progress run that has not flushed within the staleness window
        and has no live task here is flipped to error first.
        """
        gallery = await self.galleries.get_by_album_code_or_raise(album_code)
        state = gallery.face_indexing

        if (
            self.get_running_task(gallery.album_code) is None
            and is_stale(state, self.stale_after_minutes)
        ):
            message = stale_message(self.stale_after_minutes)
            if await self.galleries.mark_indexing_stale(gallery.id, state.run_id, message):
                logger.warning(f"[Indexing] Run for {gallery.album_code} marked stale")
                state = state.model_copy(update={
                    "status": IndexingStatus.ERROR,
                    "error_message": message,
                })

        return state

    async def stop_indexing(self, album_code: str) -> FaceIndexingState:
        """
        Persist stopped and cancel the live task, if any.
        Always succeeds for a known gallery; last write wins over a natural finish.
        """
        gallery = await self.galleries.get_by_album_code_or_raise(album_code)
        code = normalize_album_code(gallery.album_code)

        await self.galleries.mark_indexing_stopped(gallery.id, STOP_MESSAGE)

        task = self._tasks.pop(code, None)
        if task is not None and not task.done():
            task.cancel()
            logger.info(f"[Indexing] Cancelled run for {code}")
        else:
            logger.info(f"[Indexing] No live run for {code}, status set to stopped")

        return stopped_state(gallery.face_indexing)

    async def forget(self, album_code: str):
        """Cancel a live run without persisting anything (gallery is going away)."""
        task = self._tasks.pop(normalize_album_code(album_code), None)
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    # ==================== Background run ====================

    async def _run(self, gallery: Gallery, run_id: str, collection_id: str):
        code = normalize_album_code(gallery.album_code)

        async def flush(progress: IndexingProgress):
            await self.galleries.update_indexing_progress(gallery.id, run_id, progress.indexed)

        try:
            result = await run_indexing_pipeline(
                collection_id,
                gallery.photos,
                self.face_collections,
                self.fetcher,
                on_progress=flush,
            )
            recorded = await self.galleries.finish_indexing(
                gallery.id,
                run_id,
                IndexingStatus.COMPLETED,
                indexed_photos=result.indexed,
                total_photos=result.total,
            )
            if recorded:
                logger.info(f"[Indexing] Completed {code}: {result.indexed}/{result.total}")
            else:
                logger.info(f"[Indexing] Run {run_id} for {code} was stopped or superseded")

        except asyncio.CancelledError:
            logger.info(f"[Indexing] Run {run_id} for {code} cancelled")
            raise

        except Exception as e:
            log_error(logger, e, f"Indexing run {run_id} for {code}")
            try:
                await self.galleries.finish_indexing(
                    gallery.id,
                    run_id,
                    IndexingStatus.ERROR,
                    error_message=getattr(e, "message", None) or str(e),
                )
            except DatabaseError as db_error:
                log_error(logger, db_error, f"Indexing failure record {code}")

        finally:
            if self._tasks.get(code) is asyncio.current_task():
                del self._tasks[code]
