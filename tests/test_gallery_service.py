import asyncio

import pytest

from core.exceptions import IndexingAlreadyRunningError, ValidationError
from models.domain.gallery import FaceIndexingState, IndexingStatus, Photo
from services.gallery_service import GalleryService
from services.indexing_service import IndexingService
from tests.fakes import FakeFaceCollections, HangingFetcher, InMemoryGalleriesRepository, make_gallery


def build_service(repo, collections=None, fetcher=None):
    collections = collections or FakeFaceCollections()
    indexing = IndexingService(repo, collections, fetcher or HangingFetcher())
    return GalleryService(repo, collections, indexing), indexing


def test_toggle_favorite_adds_then_removes(galleries_repo):
    service, _ = build_service(galleries_repo)

    assert asyncio.run(service.toggle_favorite("abc123", 2)) == ("added", [2])
    assert asyncio.run(service.toggle_favorite("abc123", 0)) == ("added", [0, 2])
    assert asyncio.run(service.toggle_favorite("abc123", 2)) == ("removed", [0])
    assert asyncio.run(service.get_favorites("abc123")) == [0]


@pytest.mark.parametrize("position", [3, -1])
def test_toggle_out_of_range_is_rejected(galleries_repo, position):
    service, _ = build_service(galleries_repo)

    with pytest.raises(ValidationError):
        asyncio.run(service.toggle_favorite("abc123", position))


def test_replace_photos_resets_indexing():
    gallery = make_gallery(
        "abc123",
        face_indexing=FaceIndexingState(status=IndexingStatus.COMPLETED, indexed_photos=3, total_photos=3),
    )
    repo = InMemoryGalleriesRepository([gallery])
    service, _ = build_service(repo)

    updated = asyncio.run(service.replace_photos("abc123", [Photo(url="https://x.com/new.jpg")]))

    assert updated.photo_count == 1
    assert updated.face_indexing.status == IndexingStatus.NOT_STARTED
    assert updated.face_indexing.indexed_photos == 0


def test_replace_photos_rejected_while_indexing(galleries_repo):
    service, indexing = build_service(galleries_repo)

    async def scenario():
        await indexing.start_indexing("abc123")
        try:
            await service.replace_photos("abc123", [Photo(url="https://x.com/new.jpg")])
        finally:
            await indexing.shutdown()

    with pytest.raises(IndexingAlreadyRunningError):
        asyncio.run(scenario())
    assert galleries_repo.get("abc123").photo_count == 3


def test_delete_gallery_removes_collection(galleries_repo):
    collections = FakeFaceCollections()
    collections.create_collection("gallery-abc123")
    service, _ = build_service(galleries_repo, collections)

    assert asyncio.run(service.delete_gallery("abc123")) is True
    assert galleries_repo.galleries == {}
    assert collections.collections == set()


def test_delete_gallery_ignores_collection_failures(galleries_repo):
    service, _ = build_service(galleries_repo, FakeFaceCollections(fail_delete=True))

    assert asyncio.run(service.delete_gallery("abc123")) is False
    assert galleries_repo.galleries == {}


def test_delete_gallery_cancels_live_run(galleries_repo):
    service, indexing = build_service(galleries_repo)

    async def scenario():
        await indexing.start_indexing("abc123")
        task = indexing.get_running_task("abc123")
        await service.delete_gallery("abc123")
        return task

    task = asyncio.run(scenario())
    assert task.cancelled()
