"""
Indexing state helpers: staleness and the snapshots returned to callers.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from models.domain.gallery import FaceIndexingState, IndexingStatus

STOP_MESSAGE = "Indexing stopped by request"


def stale_cutoff(stale_after_minutes: int, now: Optional[datetime] = None) -> datetime:
    """Flushes older than this mean the run is abandoned."""
    now = now or datetime.now(timezone.utc)
    return now - timedelta(minutes=stale_after_minutes)


def is_stale(
    state: FaceIndexingState,
    stale_after_minutes: int,
    now: Optional[datetime] = None
) -> bool:
    """An in_progress state with no flush inside the staleness window."""
    if state.status != IndexingStatus.IN_PROGRESS:
        return False
    if state.updated_at is None:
        return True
    updated_at = state.updated_at
    if updated_at.tzinfo is None:
        updated_at = updated_at.replace(tzinfo=timezone.utc)
    return updated_at < stale_cutoff(stale_after_minutes, now)


def stale_message(stale_after_minutes: int) -> str:
    return f"Indexing stalled: no progress for {stale_after_minutes} minutes"


def started_state(total_photos: int) -> FaceIndexingState:
    return FaceIndexingState(
        status=IndexingStatus.IN_PROGRESS,
        indexed_photos=0,
        total_photos=total_photos,
        updated_at=datetime.now(timezone.utc),
    )


def stopped_state(previous: FaceIndexingState) -> FaceIndexingState:
    now = datetime.now(timezone.utc)
    return previous.model_copy(update={
        "status": IndexingStatus.STOPPED,
        "error_message": STOP_MESSAGE,
        "last_indexed_at": now,
        "updated_at": now,
    })
