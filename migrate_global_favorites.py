#!/usr/bin/env python3
"""
Migration script: Pool legacy per-client favorites into global_favorites.

Galleries without global_favorites get the sorted, distinct positions of
every legacy favorite row; JSON null values become empty lists.
Safe to re-run: migrated galleries are skipped.

Run: python migrate_global_favorites.py [--yes]
"""

import argparse
import asyncio
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dotenv import load_dotenv
load_dotenv()

from core.logging import setup_logging
from infrastructure.supabase import SupabaseClient
from repositories import GalleriesRepository, LegacyFavoritesRepository
from services.favorites_migration import FavoritesMigrationService


async def migrate_global_favorites(assume_yes: bool = False) -> int:
    """Run the consolidation. Returns the number of galleries updated."""
    db = SupabaseClient()
    service = FavoritesMigrationService(
        GalleriesRepository(db),
        LegacyFavoritesRepository(db),
    )

    preview = await service.preview()
    print(f"Galleries: {preview['total']}")
    print(f"  without global favorites: {preview['pending']}")
    print(f"  with null global favorites: {preview['null_valued']}")

    if not preview["pending"] and not preview["null_valued"]:
        print("No changes needed!")
        return 0

    if not assume_yes:
        confirm = input("\nApply changes? [y/N]: ")
        if confirm.lower() != 'y':
            print("Aborted")
            return 0

    result = await service.migrate()
    print(f"\nDone! {result.message} Errors: {result.failed}")
    return result.galleries_migrated


def main():
    parser = argparse.ArgumentParser(description="Consolidate legacy favorites per gallery")
    parser.add_argument("--yes", action="store_true", help="Apply without asking")
    args = parser.parse_args()

    setup_logging(level="INFO")
    asyncio.run(migrate_global_favorites(assume_yes=args.yes))


if __name__ == "__main__":
    main()
