"""
Shared fixtures.
"""

import pytest

from tests.fakes import (
    FakeFaceCollections,
    FakePhotoFetcher,
    InMemoryGalleriesRepository,
    make_gallery,
)


@pytest.fixture
def gallery():
    return make_gallery("abc123", photo_count=3)


@pytest.fixture
def galleries_repo(gallery):
    return InMemoryGalleriesRepository([gallery])


@pytest.fixture
def face_collections():
    return FakeFaceCollections()


@pytest.fixture
def fetcher(gallery):
    return FakePhotoFetcher.for_gallery(gallery)
