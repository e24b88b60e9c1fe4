"""
Remote photo fetching.
Resolves a stored photo reference to raw bytes.
"""

import re
from typing import Optional
from urllib.parse import urlparse, parse_qs

import httpx

from core.config import settings
from core.exceptions import PhotoFetchError
from core.logging import get_logger

logger = get_logger(__name__)

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

_DRIVE_FILE_RE = re.compile(r"/file/d/([a-zA-Z0-9_-]+)")
_DRIVE_ID_RE = re.compile(r"[\w-]{25,}")


def extract_drive_file_id(url: str) -> Optional[str]:
    """Google Drive file ID from a share/view link, or None for other URLs."""
    if "drive.google.com" not in url and "googleusercontent.com" not in url:
        return None

    match = _DRIVE_FILE_RE.search(url)
    if match:
        return match.group(1)

    query_ids = parse_qs(urlparse(url).query).get("id")
    if query_ids:
        return query_ids[0]

    match = _DRIVE_ID_RE.search(url)
    return match.group(0) if match else None


def resolve_photo_url(url: str) -> str:
    """Rewrite Drive view links into direct download links. Other URLs pass through."""
    file_id = extract_drive_file_id(url)
    if file_id:
        return f"https://drive.google.com/uc?export=download&id={file_id}"
    return url


class PhotoFetcher:
    """
    Downloads photos over HTTP.

    fetch() raises PhotoFetchError for any per-photo failure so callers
    can log it and move on to the next photo.
    """

    def __init__(
        self,
        timeout: float = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.timeout = timeout or settings.photo_fetch_timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
            transport=self._transport,
        )

    async def fetch(self, url: str) -> bytes:
        """
        Download one photo.

        Raises:
            PhotoFetchError: empty URL, network error, non-2xx status or empty body
        """
        if not url:
            raise PhotoFetchError(url or "", "empty URL")

        resolved = resolve_photo_url(url)
        try:
            async with self._client() as client:
                response = await client.get(resolved)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PhotoFetchError(url, f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            raise PhotoFetchError(url, str(e) or type(e).__name__)

        if not response.content:
            raise PhotoFetchError(url, "empty response body")

        logger.debug(f"Fetched {url} ({len(response.content)} bytes)")
        return response.content

    async def fetch_or_none(self, url: str) -> Optional[bytes]:
        """Download one photo, returning None (and logging) on failure."""
        try:
            return await self.fetch(url)
        except PhotoFetchError as e:
            logger.warning(f"[Fetcher] {e.message} ({url})")
            return None
