"""
Galleries Pydantic Models
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from core.responses import CamelModel


class IndexingStartResponse(CamelModel):
    status: str
    progress: int
    total_photos: int


class IndexingStatusResponse(CamelModel):
    status: str
    progress: int
    indexed_photos: int
    total_photos: int
    last_indexed_at: Optional[datetime] = None
    error_message: Optional[str] = None
    updated_at: Optional[datetime] = None
    is_ready_to_send: bool = False


class SearchMatch(BaseModel):
    index: int
    url: str
    alt: str
    confidence: float


class SearchResponse(CamelModel):
    success: bool = True
    total_photos: int
    matched_photos: int
    matches: List[SearchMatch]
    message: str


class FavoriteToggleRequest(CamelModel):
    photo_index: int


class FavoriteToggleResponse(CamelModel):
    message: str
    action: str
    favorites: List[int]


class PhotoIn(BaseModel):
    url: str = Field(..., min_length=1)
    alt: str = ""


class PhotosReplaceRequest(BaseModel):
    photos: List[PhotoIn]
