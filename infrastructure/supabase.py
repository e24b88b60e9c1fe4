"""
Unified Supabase client.
Single connection point for the gallery repositories.
"""

from typing import List, Dict, Optional, Any
from supabase import create_client, Client

from core.config import settings
from core.exceptions import DatabaseError
from core.logging import get_logger

logger = get_logger(__name__)


class SupabaseClient:
    """
    Unified Supabase client for all database operations.

    Provides:
    - Connection management
    - Pagination support
    """

    def __init__(self, url: str = None, key: str = None):
        self._url = url or settings.supabase_url
        self._key = key or settings.supabase_service_role_key
        self._client: Optional[Client] = None
        self._connect()

    def _connect(self):
        """Establish connection to Supabase."""
        if not self._url or not self._key:
            raise DatabaseError(
                "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set",
                operation="connect"
            )
        try:
            self._client = create_client(self._url, self._key)
            logger.info("Supabase client initialized")
        except Exception as e:
            logger.error(f"Failed to connect to Supabase: {e}")
            raise DatabaseError(str(e), operation="connect")

    @property
    def client(self) -> Client:
        """Get raw Supabase client for direct queries."""
        if not self._client:
            self._connect()
        return self._client

    # ============================================================
    # Pagination Helper
    # ============================================================

    async def paginated_query(
        self,
        table: str,
        columns: str = "*",
        page_size: int = 1000,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        order_desc: bool = False
    ) -> List[Dict]:
        """
        Execute paginated query to load all results.

        Args:
            table: Table name
            columns: Columns to select
            page_size: Records per page
            filters: Optional equality filters (None value means IS NULL)
            order_by: Column to order by
            order_desc: Descending order

        Returns:
            All matching records
        """
        all_data = []
        offset = 0

        while True:
            try:
                query = self.client.table(table).select(columns)

                if filters:
                    for key, value in filters.items():
                        if value is None:
                            query = query.is_(key, "null")
                        else:
                            query = query.eq(key, value)

                if order_by:
                    query = query.order(order_by, desc=order_desc)

                query = query.range(offset, offset + page_size - 1)
                response = query.execute()

                if not response.data:
                    break

                all_data.extend(response.data)

                if len(response.data) < page_size:
                    break

                offset += page_size
                logger.debug(f"Loaded {len(all_data)} records from {table}...")

            except Exception as e:
                logger.error(f"Paginated query failed: {table} - {e}")
                raise DatabaseError(str(e), operation=f"{table}.paginated_select")

        logger.debug(f"Loaded {len(all_data)} total records from {table}")
        return all_data
