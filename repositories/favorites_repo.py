"""
Legacy favorites repository - customer_favorites table.

Per-client favorite rows (gallery_id, photo_index, customer_ip) written
before favorites were pooled per gallery. Read-only.
"""

from typing import List

from repositories.base import BaseRepository
from core.config import settings
from core.logging import get_logger

logger = get_logger(__name__)


class LegacyFavoritesRepository(BaseRepository):
    """
    Repository for the legacy customer_favorites table.
    """

    table_name = "customer_favorites"

    def __init__(self, supabase_client, table_name: str = None):
        super().__init__(supabase_client, table_name or settings.legacy_favorites_table)

    async def list_positions(self, gallery_id: str) -> List[int]:
        """
        All favorited photo positions for a gallery, across every client.
        Duplicates are kept; callers dedupe.
        """
        rows = await self.client.paginated_query(
            self.table_name,
            columns="photo_index",
            filters={"gallery_id": gallery_id}
        )
        return [row["photo_index"] for row in rows if row.get("photo_index") is not None]
