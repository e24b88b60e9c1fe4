"""
Archive entry and download file names.
"""

import re
from urllib.parse import urlparse

from services.archive.selection import SelectionMode
from services.archive.tar_writer import NAME_SIZE

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")

SUFFIXES = {
    SelectionMode.FULL: "",
    SelectionMode.FAVORITES: "_Favorites",
    SelectionMode.FACE_MATCHES: "_Face_Matches",
}


def safe_segment(value: str) -> str:
    """Every non-alphanumeric character becomes an underscore."""
    return _UNSAFE_CHARS.sub("_", value or "")


def extension_for(url: str) -> str:
    """.jpg / .png from the URL path; .jpg when it cannot be told."""
    path = urlparse(url or "").path.lower()
    if path.endswith(".png"):
        return ".png"
    return ".jpg"


def entry_name(customer_name: str, event_type: str, sequence: int, url: str) -> str:
    """
    <Customer>_<Event>_<NNN><ext>, sequence is 1-based.

    The customer/event prefix is cut so the name fits a tar header;
    the sequence and extension are always kept.
    """
    suffix = f"_{sequence:03d}{extension_for(url)}"
    prefix = f"{safe_segment(customer_name)}_{safe_segment(event_type)}"
    return prefix[:NAME_SIZE - len(suffix)] + suffix


def archive_filename(customer_name: str, event_type: str, mode: SelectionMode) -> str:
    return (
        f"{safe_segment(customer_name)}_{safe_segment(event_type)}"
        f"{SUFFIXES[mode]}_Photos.tar.gz"
    )
