"""
Download selection: which photos of a gallery go into an archive.
"""

from enum import Enum
from typing import List, Optional, Tuple

from core.exceptions import InvalidSelectionError, ValidationError
from models.domain.gallery import Gallery, Photo


class SelectionMode(str, Enum):
    FULL = "full"
    FAVORITES = "favorites"
    FACE_MATCHES = "face-matches"


# Query parameter carrying the positions for each partial mode
POSITION_PARAMS = {
    SelectionMode.FAVORITES: "favorites",
    SelectionMode.FACE_MATCHES: "faces",
}


def parse_mode(value: Optional[str]) -> SelectionMode:
    try:
        return SelectionMode(value or SelectionMode.FULL.value)
    except ValueError:
        raise ValidationError(f"Unknown download type: {value}", field="type")


def parse_positions(raw: Optional[str]) -> List[int]:
    """
    Comma separated positions, in order, duplicates removed.
    Tokens that are not integers are ignored.
    """
    positions: List[int] = []
    for token in (raw or "").split(","):
        token = token.strip()
        try:
            position = int(token)
        except ValueError:
            continue
        if position not in positions:
            positions.append(position)
    return positions


def select_photos(
    gallery: Gallery,
    mode: SelectionMode,
    raw_positions: Optional[str] = None
) -> List[Tuple[int, Photo]]:
    """
    (position, photo) pairs to package.

    Out-of-range positions are dropped. A partial selection that ends up
    empty is rejected before anything is fetched.

    Raises:
        InvalidSelectionError: missing or entirely invalid position list
    """
    if mode == SelectionMode.FULL:
        return list(enumerate(gallery.photos))

    label = "favorites" if mode == SelectionMode.FAVORITES else "face matches"
    if not raw_positions or not raw_positions.strip():
        raise InvalidSelectionError(f"No {label} specified")

    selected = []
    for position in parse_positions(raw_positions):
        photo = gallery.photo_at(position)
        if photo is not None:
            selected.append((position, photo))

    if not selected:
        raise InvalidSelectionError(f"No valid {label} found")
    return selected
