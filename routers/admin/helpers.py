"""
Admin Helper Functions
"""

from core.exceptions import ServiceUnavailableError


def get_migration_service():
    """Get favorites migration service from package globals."""
    from . import migration_service_instance
    if migration_service_instance is None:
        raise ServiceUnavailableError("Favorites migration service")
    return migration_service_instance


def get_face_collections():
    """Get face collection client from package globals."""
    from . import face_collections_instance
    if face_collections_instance is None:
        raise ServiceUnavailableError("Face collection service")
    return face_collections_instance
