"""
Repositories package - data access layer.

Repositories handle all database operations.
No business logic - only queries and data transformation.

Usage:
    from repositories import GalleriesRepository

    repo = GalleriesRepository(supabase_client)
    gallery = await repo.get_by_album_code(album_code)
"""

from repositories.base import BaseRepository
from repositories.galleries_repo import GalleriesRepository
from repositories.favorites_repo import LegacyFavoritesRepository

__all__ = [
    'BaseRepository',
    'GalleriesRepository',
    'LegacyFavoritesRepository',
]
