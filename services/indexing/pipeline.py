"""
Indexing Pipeline

One pass over a gallery's photos: fetch, enroll under "photo-<position>",
report progress after every photo.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional

from pydantic import BaseModel

from core.exceptions import PerItemFailure
from core.logging import get_logger
from models.domain.face import enrollment_key
from models.domain.gallery import Photo

logger = get_logger(__name__)


class IndexingProgress(BaseModel):
    """Counters of a run. indexed only grows on a successful enroll call."""

    total: int
    processed: int = 0
    indexed: int = 0
    failed: int = 0
    faces_found: int = 0


ProgressCallback = Callable[[IndexingProgress], Awaitable[None]]


async def run_indexing_pipeline(
    collection_id: str,
    photos: List[Photo],
    face_collections,
    fetcher,
    on_progress: Optional[ProgressCallback] = None
) -> IndexingProgress:
    """
    Enroll every photo of a gallery, in stored order.

    A photo that cannot be fetched or enrolled is logged and skipped.
    Anything else (the face service becoming unreachable, a failing
    progress flush, a bug) propagates and fails the run.

    Args:
        collection_id: Target face collection
        photos: Gallery photos; list index is the position
        face_collections: FaceCollectionService
        fetcher: PhotoFetcher
        on_progress: Awaited with a snapshot after each photo

    Returns:
        Final counters
    """
    progress = IndexingProgress(total=len(photos))
    logger.info(f"[Pipeline] Indexing {progress.total} photos into {collection_id}")

    for position, photo in enumerate(photos):
        key = enrollment_key(position)
        try:
            image_bytes = await fetcher.fetch(photo.url)
            faces = await asyncio.to_thread(
                face_collections.enroll, collection_id, image_bytes, key
            )
        except PerItemFailure as e:
            progress.failed += 1
            logger.warning(f"[Pipeline] Skipping {key}: {e.message}")
        else:
            progress.indexed += 1
            progress.faces_found += faces
            if not faces:
                logger.debug(f"[Pipeline] No usable face in {key}")

        progress.processed += 1
        if on_progress is not None:
            await on_progress(progress.model_copy())

    logger.info(
        f"[Pipeline] Done: {progress.indexed}/{progress.total} indexed, "
        f"{progress.failed} failed, {progress.faces_found} faces"
    )
    return progress
