"""
Customer gallery domain models.
A gallery is one customer's delivered photo set plus its face indexing state.
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field
from enum import Enum


class GalleryStatus(str, Enum):
    """Gallery publication status."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class IndexingStatus(str, Enum):
    """Face indexing state machine."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ERROR = "error"
    STOPPED = "stopped"


class Photo(BaseModel):
    """Photo in a gallery. Its list index is its position."""

    url: str = Field(..., description="Remote image URL")
    alt: str = Field("", description="Alt text")


class FaceIndexingState(BaseModel):
    """Persisted face indexing progress of one gallery."""

    status: IndexingStatus = Field(IndexingStatus.NOT_STARTED)
    indexed_photos: int = Field(0, ge=0)
    total_photos: int = Field(0, ge=0)
    last_indexed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    error_message: str = ""
    run_id: Optional[str] = None

    @property
    def progress(self) -> int:
        """Progress percentage (0-100), 0 when there is nothing to index."""
        if self.total_photos <= 0:
            return 0
        return round(self.indexed_photos / self.total_photos * 100)

    @property
    def is_running(self) -> bool:
        return self.status == IndexingStatus.IN_PROGRESS


class Gallery(BaseModel):
    """Customer gallery."""

    id: str = Field(..., description="Unique gallery ID")
    album_code: str = Field(..., description="Case-normalized external reference")
    customer_name: str = Field("", description="Customer display name")
    event_type: str = Field("", description="Event type (wedding, portrait, ...)")

    status: GalleryStatus = Field(GalleryStatus.DRAFT)
    is_active: bool = Field(True)
    face_recognition_enabled: bool = Field(False)

    photos: List[Photo] = Field(default_factory=list)
    global_favorites: Optional[List[int]] = Field(None, description="Shared favorite positions")
    face_indexing: FaceIndexingState = Field(default_factory=FaceIndexingState)

    @property
    def photo_count(self) -> int:
        return len(self.photos)

    def photo_at(self, position: int) -> Optional[Photo]:
        """Photo at a position, or None when out of range."""
        if 0 <= position < len(self.photos):
            return self.photos[position]
        return None

    def sorted_favorites(self) -> List[int]:
        return sorted(set(self.global_favorites or []))


def normalize_album_code(album_code: str) -> str:
    """Album codes are stored lower-case and trimmed."""
    return (album_code or "").strip().lower()
