"""
Unified API response format.
Used for error bodies and for endpoints without a fixed external shape.
"""

from typing import TypeVar, Generic, Optional, Any, Dict
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar('T')


class ApiResponse(BaseModel, Generic[T]):
    """
    Unified API response wrapper.

    {
        "success": true/false,
        "data": <payload or null>,
        "error": <error message or null>,
        "code": <error code for errors, null for success>,
        "meta": <optional metadata>
    }
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    code: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None

    @classmethod
    def ok(cls, data: T = None, meta: Dict[str, Any] = None) -> "ApiResponse[T]":
        """Create successful response."""
        return cls(success=True, data=data, meta=meta)

    @classmethod
    def fail(
        cls,
        message: str,
        code: str = "ERROR",
    ) -> "ApiResponse":
        """Create error response."""
        return cls(success=False, error=message, code=code)

    @classmethod
    def from_exception(cls, exc: "AppException") -> "ApiResponse":
        """Create error response from AppException."""
        return cls(success=False, error=exc.message, code=exc.code)


class CamelModel(BaseModel):
    """
    Base for response bodies whose wire keys are camelCase
    (totalPhotos, indexedPhotos, ...). Dump with by_alias=True.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_response(self, exclude_none: bool = False) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=exclude_none)
