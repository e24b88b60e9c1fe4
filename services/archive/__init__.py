"""
Archive Package - gallery downloads as .tar.gz.

Modules:
- tar_writer.py - Hand-written tar headers/blocks
- builder.py - Fetch, stage and compress photos
- selection.py - Download type and position parsing
- naming.py - Entry and download file names
"""

from .tar_writer import TarWriter, build_header, encode_archive, header_checksum
from .selection import SelectionMode, POSITION_PARAMS, parse_mode, parse_positions, select_photos
from .naming import archive_filename, entry_name, extension_for, safe_segment
from .builder import ArchiveBuilder, ArchiveItem, ArchiveResult, archive_items

__all__ = [
    # Tar
    "TarWriter",
    "build_header",
    "encode_archive",
    "header_checksum",

    # Selection
    "SelectionMode",
    "POSITION_PARAMS",
    "parse_mode",
    "parse_positions",
    "select_photos",

    # Naming
    "archive_filename",
    "entry_name",
    "extension_for",
    "safe_segment",

    # Builder
    "ArchiveBuilder",
    "ArchiveItem",
    "ArchiveResult",
    "archive_items",
]
