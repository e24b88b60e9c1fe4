"""
ArchiveBuilder - packages remote photos into one .tar.gz body.

Photos are fetched in concurrent batches, staged to a temporary directory,
then written through TarWriter into a gzip stream. The staging directory
is removed on every exit path.
"""

import asyncio
import gzip
import os
import tempfile
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from core.config import settings
from core.exceptions import NothingToPackageError
from core.logging import get_logger
from models.domain.gallery import Photo
from services.archive.naming import entry_name
from services.archive.tar_writer import TarWriter

logger = get_logger(__name__)

ARCHIVE_FILE_NAME = "archive.tar.gz"


class ArchiveItem(BaseModel):
    """One photo to package under a fixed entry name."""

    name: str
    url: str


class ArchiveResult(BaseModel):
    content: bytes
    entries: List[str] = Field(default_factory=list)
    skipped: int = 0


class ArchiveBuilder:
    """
    Builds gzipped tar archives of remote photos.

    Per-photo fetch failures are logged and skipped; only an archive
    that would be empty is an error.
    """

    def __init__(
        self,
        fetcher,
        concurrency: int = None,
        temp_dir: Optional[str] = None,
        compression_level: int = None
    ):
        """
        Args:
            fetcher: PhotoFetcher (fetch_or_none is used)
            concurrency: Photos fetched per batch
            temp_dir: Parent directory for staging (system default if None)
            compression_level: gzip level 0-9
        """
        self.fetcher = fetcher
        self.concurrency = concurrency or settings.archive_fetch_concurrency
        self.temp_dir = temp_dir if temp_dir is not None else settings.archive_temp_dir
        self.compression_level = (
            compression_level if compression_level is not None
            else settings.archive_compression_level
        )

    async def build(self, items: List[ArchiveItem]) -> ArchiveResult:
        """
        Fetch, stage and package.

        Raises:
            NothingToPackageError: none of the photos could be fetched
        """
        with tempfile.TemporaryDirectory(prefix="gallery-archive-", dir=self.temp_dir) as staging:
            staged = await self._fetch_and_stage(items, staging)

            if not staged:
                logger.warning(f"[Archive] None of {len(items)} photos could be fetched")
                raise NothingToPackageError()

            archive_path = os.path.join(staging, ARCHIVE_FILE_NAME)
            await asyncio.to_thread(self._write_archive, staged, archive_path)
            content = await asyncio.to_thread(_read_file, archive_path)

        skipped = len(items) - len(staged)
        logger.info(
            f"[Archive] Packaged {len(staged)} photos ({len(content)} bytes), skipped {skipped}"
        )
        return ArchiveResult(
            content=content,
            entries=[name for name, _ in staged],
            skipped=skipped,
        )

    async def _fetch_and_stage(
        self,
        items: List[ArchiveItem],
        staging: str
    ) -> List[Tuple[str, str]]:
        """(entry name, staged path) for every fetched photo, in item order."""
        staged: List[Tuple[str, str]] = []

        for batch_start in range(0, len(items), self.concurrency):
            batch = items[batch_start:batch_start + self.concurrency]
            contents = await asyncio.gather(
                *(self.fetcher.fetch_or_none(item.url) for item in batch),
                return_exceptions=True,
            )
            # Whole batch has settled; surface the first unexpected error
            for content in contents:
                if isinstance(content, BaseException):
                    raise content
            for offset, (item, content) in enumerate(zip(batch, contents)):
                if content is None:
                    continue
                path = os.path.join(staging, f"{batch_start + offset:06d}.part")
                await asyncio.to_thread(_write_file, path, content)
                staged.append((item.name, path))

        return staged

    def _write_archive(self, staged: List[Tuple[str, str]], archive_path: str):
        with open(archive_path, "wb") as raw:
            with gzip.GzipFile(
                filename="",
                fileobj=raw,
                mode="wb",
                compresslevel=self.compression_level,
            ) as gz:
                with TarWriter(gz) as tar:
                    for name, path in staged:
                        tar.add_path(name, path)


def archive_items(
    selected: List[Tuple[int, Photo]],
    customer_name: str,
    event_type: str
) -> List[ArchiveItem]:
    """Name the selected photos by their 1-based order in the selection."""
    return [
        ArchiveItem(
            name=entry_name(customer_name, event_type, sequence, photo.url),
            url=photo.url,
        )
        for sequence, (_, photo) in enumerate(selected, start=1)
    ]


def _write_file(path: str, content: bytes):
    with open(path, "wb") as f:
        f.write(content)


def _read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()
