"""
Galleries Helper Functions
"""

from core.exceptions import ServiceUnavailableError
from models.domain.gallery import FaceIndexingState, IndexingStatus

from .models import IndexingStatusResponse


def _require(instance, name: str):
    if instance is None:
        raise ServiceUnavailableError(name)
    return instance


def get_indexing_service():
    """Get indexing service instance from package globals."""
    from . import indexing_service_instance
    return _require(indexing_service_instance, "Indexing service")


def get_search_service():
    """Get search service instance from package globals."""
    from . import search_service_instance
    return _require(search_service_instance, "Search service")


def get_gallery_service():
    """Get gallery service instance from package globals."""
    from . import gallery_service_instance
    return _require(gallery_service_instance, "Gallery service")


def get_archive_builder():
    """Get archive builder instance from package globals."""
    from . import archive_builder_instance
    return _require(archive_builder_instance, "Archive builder")


def get_galleries_repo():
    """Get galleries repository instance from package globals."""
    from . import galleries_repo_instance
    return _require(galleries_repo_instance, "Galleries repository")


def status_response(state: FaceIndexingState) -> dict:
    """GET /indexing body. errorMessage is sent only when there is one."""
    body = IndexingStatusResponse(
        status=state.status.value,
        progress=state.progress,
        indexed_photos=state.indexed_photos,
        total_photos=state.total_photos,
        last_indexed_at=state.last_indexed_at,
        error_message=state.error_message or None,
        updated_at=state.updated_at,
        is_ready_to_send=state.status == IndexingStatus.COMPLETED,
    ).to_response()
    if body["errorMessage"] is None:
        del body["errorMessage"]
    return body
