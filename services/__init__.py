"""
Services package.

Main modules:
- indexing_service.py - IndexingService facade (start/status/stop)
- face_collection.py - FaceCollectionService (Rekognition collections)
- face_search.py - FaceSearchService (selfie search)
- gallery_service.py - GalleryService (favorites, photo replacement, deletion)
- favorites_migration.py - FavoritesMigrationService

Subpackages:
- indexing/ - Indexing pipeline and state helpers
- archive/ - Tar writer and archive builder
"""

from services.face_collection import FaceCollectionService, collection_id_for
from services.indexing_service import IndexingService
from services.face_search import FaceSearchService
from services.gallery_service import GalleryService
from services.favorites_migration import FavoritesMigrationService
from services.archive import ArchiveBuilder

__all__ = [
    'FaceCollectionService',
    'collection_id_for',
    'IndexingService',
    'FaceSearchService',
    'GalleryService',
    'FavoritesMigrationService',
    'ArchiveBuilder',
]
