"""
Models package - data structures for the application.

Subpackages:
- domain/ - Domain models (core business entities)
"""

from models.domain.gallery import Gallery, Photo, FaceIndexingState, IndexingStatus
from models.domain.face import FaceRecord, FaceMatch, PhotoMatch

__all__ = [
    # Gallery
    'Gallery',
    'Photo',
    'FaceIndexingState',
    'IndexingStatus',
    # Face
    'FaceRecord',
    'FaceMatch',
    'PhotoMatch',
]
