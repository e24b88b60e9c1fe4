"""
Domain models - core business entities.

These are the source of truth for data structures.
All other layers (requests, responses, repositories) derive from these.
"""

from models.domain.face import (
    BoundingBox,
    FaceRecord,
    FaceMatch,
    PhotoMatch,
    enrollment_key,
    parse_enrollment_key,
)
from models.domain.gallery import (
    Gallery,
    GalleryStatus,
    Photo,
    FaceIndexingState,
    IndexingStatus,
    normalize_album_code,
)

__all__ = [
    'BoundingBox',
    'FaceRecord',
    'FaceMatch',
    'PhotoMatch',
    'enrollment_key',
    'parse_enrollment_key',
    'Gallery',
    'GalleryStatus',
    'Photo',
    'FaceIndexingState',
    'IndexingStatus',
    'normalize_album_code',
]
