"""
Base repository with common functionality.
"""

from typing import Dict, Any, TypeVar, Generic
from pydantic import BaseModel

from core.exceptions import DatabaseError
from core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T', bound=BaseModel)


class BaseRepository(Generic[T]):
    """
    Base repository providing common database operations.

    Subclasses should:
    - Set `table_name` class attribute
    - Set `model_class` class attribute
    - Implement domain-specific methods
    """

    table_name: str = None
    model_class: type = None

    def __init__(self, supabase_client, table_name: str = None):
        """
        Initialize repository.

        Args:
            supabase_client: SupabaseClient instance (from infrastructure/)
            table_name: Override for the class-level table name
        """
        self.client = supabase_client
        if table_name:
            self.table_name = table_name
        self.logger = get_logger(f"repo.{self.__class__.__name__}")

    @property
    def table(self):
        """Get table reference for queries."""
        return self.client.client.table(self.table_name)

    # ============================================================
    # Generic CRUD Operations
    # ============================================================

    async def count(self, filters: Dict[str, Any] = None) -> int:
        """
        Count records matching filters.
        """
        try:
            query = self.table.select("id", count="exact")

            if filters:
                for key, value in filters.items():
                    if value is None:
                        query = query.is_(key, "null")
                    else:
                        query = query.eq(key, value)

            response = query.execute()
            return response.count or 0

        except Exception as e:
            self._handle_error("count", e)

    async def delete(self, id: str) -> bool:
        """
        Delete record by ID.
        """
        try:
            response = self.table.delete().eq("id", id).execute()
            return len(response.data) > 0

        except Exception as e:
            self._handle_error("delete", e)

    # ============================================================
    # Helper Methods
    # ============================================================

    def _to_model(self, data: Dict) -> T:
        """
        Convert database row to model instance.
        Override in subclasses for custom transformation.
        """
        if self.model_class is None:
            return data
        return self.model_class(**data)

    def _handle_error(self, operation: str, error: Exception):
        """
        Handle database error with logging.
        """
        self.logger.error(f"{operation} failed: {error}")
        raise DatabaseError(str(error), operation=f"{self.table_name}.{operation}")
