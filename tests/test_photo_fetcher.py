import asyncio

import httpx
import pytest

from core.exceptions import PhotoFetchError
from infrastructure.storage import PhotoFetcher, extract_drive_file_id, resolve_photo_url

DRIVE_ID = "1AbCdEfGhIjKlMnOpQrStUvWxYz012345"


def fetcher_for(handler) -> PhotoFetcher:
    return PhotoFetcher(timeout=5, transport=httpx.MockTransport(handler))


@pytest.mark.parametrize("url", [
    f"https://drive.google.com/file/d/{DRIVE_ID}/view?usp=sharing",
    f"https://drive.google.com/open?id={DRIVE_ID}",
    f"https://drive.google.com/uc?export=view&id={DRIVE_ID}",
])
def test_drive_links_are_rewritten(url):
    assert extract_drive_file_id(url) == DRIVE_ID
    assert resolve_photo_url(url) == f"https://drive.google.com/uc?export=download&id={DRIVE_ID}"


def test_other_urls_pass_through():
    url = "https://cdn.example.com/photos/1.jpg"
    assert extract_drive_file_id(url) is None
    assert resolve_photo_url(url) == url


def test_fetch_returns_body_and_sends_user_agent():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["agent"] = request.headers.get("user-agent")
        return httpx.Response(200, content=b"jpeg-bytes")

    content = asyncio.run(fetcher_for(handler).fetch(f"https://drive.google.com/file/d/{DRIVE_ID}/view"))

    assert content == b"jpeg-bytes"
    assert seen["url"] == f"https://drive.google.com/uc?export=download&id={DRIVE_ID}"
    assert seen["agent"].startswith("Mozilla/5.0")


def test_http_error_status_is_per_item_failure():
    fetcher = fetcher_for(lambda request: httpx.Response(404))

    with pytest.raises(PhotoFetchError) as exc_info:
        asyncio.run(fetcher.fetch("https://cdn.example.com/missing.jpg"))
    assert "HTTP 404" in exc_info.value.message


def test_network_error_is_per_item_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PhotoFetchError):
        asyncio.run(fetcher_for(handler).fetch("https://cdn.example.com/a.jpg"))


def test_empty_body_is_per_item_failure():
    fetcher = fetcher_for(lambda request: httpx.Response(200, content=b""))

    with pytest.raises(PhotoFetchError):
        asyncio.run(fetcher.fetch("https://cdn.example.com/a.jpg"))


def test_empty_url_is_per_item_failure():
    with pytest.raises(PhotoFetchError):
        asyncio.run(fetcher_for(lambda request: httpx.Response(200)).fetch(""))


def test_fetch_or_none_swallows_per_item_failure():
    fetcher = fetcher_for(lambda request: httpx.Response(500))

    assert asyncio.run(fetcher.fetch_or_none("https://cdn.example.com/a.jpg")) is None
