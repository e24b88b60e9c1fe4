"""
FavoritesMigrationService - pools legacy per-client favorites into
customer_galleries.global_favorites.

Safe to run repeatedly: a gallery is only touched while its
global_favorites is missing (SQL NULL) or a JSON null.
"""

from typing import Dict, List

from pydantic import BaseModel

from core.exceptions import DatabaseError
from core.logging import get_logger, log_error
from core.responses import CamelModel

logger = get_logger(__name__)


class MigrationStatus(CamelModel):
    total_galleries: int
    migrated_galleries: int
    pending_galleries: int
    migration_complete: bool


class MigrationResult(BaseModel):
    galleries_migrated: int
    failed: int = 0

    @property
    def message(self) -> str:
        return f"Migration completed. Updated {self.galleries_migrated} galleries."


def consolidate_positions(positions: List[int]) -> List[int]:
    """Distinct positions, ascending."""
    return sorted(set(positions))


class FavoritesMigrationService:

    def __init__(self, galleries_repo, legacy_favorites_repo):
        """
        Args:
            galleries_repo: GalleriesRepository
            legacy_favorites_repo: LegacyFavoritesRepository
        """
        self.galleries = galleries_repo
        self.legacy_favorites = legacy_favorites_repo

    async def migrate(self) -> MigrationResult:
        """
        Write global_favorites for every gallery that lacks it and turn
        JSON nulls into empty lists.

        A gallery that fails is logged and left pending for the next run.
        """
        missing = await self.galleries.list_missing_global_favorites()
        logger.info(f"[Migration] Found {len(missing)} galleries to migrate")

        migrated = 0
        failed = 0

        for row in missing:
            try:
                positions = consolidate_positions(
                    await self.legacy_favorites.list_positions(row["id"])
                )
                await self.galleries.set_global_favorites(row["id"], positions)
            except DatabaseError as e:
                log_error(logger, e, f"Migration {row.get('album_code')}")
                failed += 1
                continue

            logger.info(f"[Migration] Migrated {row.get('album_code')}: {len(positions)} favorites")
            migrated += 1

        for row in await self.galleries.list_null_global_favorites():
            try:
                await self.galleries.set_global_favorites(row["id"], [])
            except DatabaseError as e:
                log_error(logger, e, f"Migration {row.get('album_code')}")
                failed += 1
                continue

            logger.info(f"[Migration] Fixed null global favorites for {row.get('album_code')}")
            migrated += 1

        result = MigrationResult(galleries_migrated=migrated, failed=failed)
        logger.info(f"[Migration] {result.message}")
        return result

    async def get_status(self) -> MigrationStatus:
        total = await self.galleries.count()
        pending = await self.galleries.count_missing_global_favorites()
        null_valued = await self.galleries.count_null_global_favorites()

        return MigrationStatus(
            total_galleries=total,
            migrated_galleries=max(total - pending - null_valued, 0),
            pending_galleries=pending,
            migration_complete=pending == 0,
        )

    async def preview(self) -> Dict[str, int]:
        """Counts for the CLI before it asks for confirmation."""
        status = await self.get_status()
        return {
            "total": status.total_galleries,
            "pending": status.pending_galleries,
            "null_valued": await self.galleries.count_null_global_favorites(),
        }
