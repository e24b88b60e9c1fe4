"""
Face collection domain models.
Typed shapes for the remote biometric service's records and matches.
"""

import re
from typing import Optional
from pydantic import BaseModel, Field


ENROLLMENT_KEY_PREFIX = "photo-"
_ENROLLMENT_KEY_RE = re.compile(r"^photo-(\d+)$")


class BoundingBox(BaseModel):
    """Face bounding box, ratios of the image size."""

    width: float = 0.0
    height: float = 0.0
    left: float = 0.0
    top: float = 0.0


class FaceRecord(BaseModel):
    """A face stored in a collection."""

    face_id: str
    external_key: Optional[str] = None
    confidence: float = Field(0.0, description="Detection confidence (0-100)")
    bounding_box: Optional[BoundingBox] = None

    @property
    def position(self) -> Optional[int]:
        return parse_enrollment_key(self.external_key)


class FaceMatch(BaseModel):
    """A search hit, as returned by the service."""

    face: FaceRecord
    similarity: float = Field(..., ge=0, le=100)

    @property
    def external_key(self) -> Optional[str]:
        return self.face.external_key


class PhotoMatch(BaseModel):
    """A search hit mapped back to a gallery photo."""

    index: int
    url: str
    alt: str = ""
    confidence: float
    face_id: Optional[str] = None


def enrollment_key(position: int) -> str:
    """External key a photo's faces are stored under."""
    if position < 0:
        raise ValueError(f"Invalid photo position: {position}")
    return f"{ENROLLMENT_KEY_PREFIX}{position}"


def parse_enrollment_key(external_key: Optional[str]) -> Optional[int]:
    """Decode 'photo-<position>' back to a position. None if it does not follow the convention."""
    if not external_key:
        return None
    match = _ENROLLMENT_KEY_RE.match(external_key)
    if not match:
        return None
    return int(match.group(1))
