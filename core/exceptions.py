"""
Custom exception hierarchy for the application.
All exceptions inherit from AppException for unified handling.
"""

from typing import Optional, Dict, Any


class AppException(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        status_code: HTTP status code for API responses
        details: Additional error details
    """

    def __init__(
        self,
        message: str,
        code: str = "ERROR",
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# === Not Found Errors ===

class NotFoundError(AppException):
    """Resource not found."""

    def __init__(self, entity: str, identifier: str = None):
        message = f"{entity} not found"
        if identifier:
            message = f"{entity} '{identifier}' not found"
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404
        )


class GalleryNotFoundError(NotFoundError):
    def __init__(self, album_code: str):
        super().__init__("Gallery", album_code)


class CollectionNotFoundError(NotFoundError):
    def __init__(self, collection_id: str):
        super().__init__("Face collection", collection_id)


# === Validation Errors ===

class ValidationError(AppException):
    """Input validation failed."""

    def __init__(self, message: str, field: str = None, code: str = "VALIDATION_ERROR"):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            code=code,
            status_code=400,
            details=details
        )


class InvalidSelectionError(ValidationError):
    def __init__(self, message: str = "No valid favorites found"):
        super().__init__(message=message, field="favorites", code="INVALID_SELECTION")


class NoFaceInProbeError(ValidationError):
    def __init__(self):
        super().__init__(
            message="No face detected in the submitted photo",
            field="selfie",
            code="NO_FACE_DETECTED"
        )


# === Indexing state errors ===

class IndexingAlreadyRunningError(AppException):
    """Start requested while a run is in progress."""

    def __init__(self, album_code: str):
        super().__init__(
            message=f"Face indexing is already running for gallery '{album_code}'",
            code="ALREADY_RUNNING",
            status_code=409
        )


class NotEligibleError(AppException):
    """Gallery cannot be indexed (feature disabled or no photos)."""

    def __init__(self, reason: str):
        super().__init__(
            message=reason,
            code="NOT_ELIGIBLE",
            status_code=400
        )


# === Upstream / per-item errors ===

class UpstreamUnavailableError(AppException):
    """Remote face recognition service cannot be reached or refused the call."""

    def __init__(self, message: str, operation: str = None):
        details = {"operation": operation} if operation else {}
        super().__init__(
            message=message,
            code="UPSTREAM_UNAVAILABLE",
            status_code=503,
            details=details
        )


class PerItemFailure(AppException):
    """A single photo failed. Recovered locally, never surfaced to HTTP callers."""

    def __init__(self, message: str, item: str = None):
        details = {"item": item} if item else {}
        super().__init__(
            message=message,
            code="PER_ITEM_FAILURE",
            status_code=500,
            details=details
        )


class PhotoFetchError(PerItemFailure):
    def __init__(self, url: str, reason: str):
        super().__init__(message=f"Failed to fetch photo: {reason}", item=url)


class EnrollmentError(PerItemFailure):
    def __init__(self, external_key: str, reason: str):
        super().__init__(message=f"Failed to enroll face: {reason}", item=external_key)


# === Archive Errors ===

class NothingToPackageError(AppException):
    """None of the selected photos could be fetched."""

    def __init__(self, message: str = "No images could be downloaded"):
        super().__init__(
            message=message,
            code="NOTHING_TO_PACKAGE",
            status_code=500
        )


# === Database Errors ===

class DatabaseError(AppException):
    """Database operation failed."""

    def __init__(self, message: str, operation: str = None):
        details = {"operation": operation} if operation else {}
        super().__init__(
            message=f"Database error: {message}",
            code="DATABASE_ERROR",
            status_code=500,
            details=details
        )


# === Wiring Errors ===

class ServiceUnavailableError(AppException):
    """A service was used before startup wired it."""

    def __init__(self, name: str):
        super().__init__(
            message=f"{name} is not initialized",
            code="SERVICE_UNAVAILABLE",
            status_code=503
        )
