"""
Minimal tar writer.

Only two operations are needed: append a regular file, and finalize.
Headers use the v7 layout (no ustar magic) which every tar reader accepts:

    offset  size  field
    0       100   name, NUL padded
    100     8     mode      "0000644\\0"
    108     8     uid       "0000000\\0"
    116     8     gid       "0000000\\0"
    124     12    size      11 octal digits + NUL
    136     12    mtime     11 octal digits + NUL
    148     8     checksum  6 octal digits + NUL + space
    156     356   zero
"""

import io
import gzip
import time
from typing import BinaryIO, Iterable, Optional, Tuple

BLOCK_SIZE = 512
NAME_SIZE = 100
END_OF_ARCHIVE = b"\0" * (BLOCK_SIZE * 2)

_CHECKSUM_OFFSET = 148
_CHECKSUM_SIZE = 8


def _octal(value: int, width: int) -> bytes:
    """width-1 zero-padded octal digits followed by a NUL."""
    digits = format(value, "o").zfill(width - 1)
    if len(digits) > width - 1:
        raise ValueError(f"Value {value} does not fit a {width}-byte tar field")
    return digits.encode("ascii") + b"\0"


def header_checksum(header: bytes) -> int:
    """Unsigned byte sum with the checksum field counted as eight spaces."""
    return (
        sum(header[:_CHECKSUM_OFFSET])
        + ord(" ") * _CHECKSUM_SIZE
        + sum(header[_CHECKSUM_OFFSET + _CHECKSUM_SIZE:])
    )


def build_header(name: str, size: int, mtime: Optional[int] = None) -> bytes:
    """
    512-byte header for one regular file.

    Raises:
        ValueError: name longer than 100 bytes, or size/mtime out of range
    """
    encoded_name = name.encode("utf-8")
    if not encoded_name or len(encoded_name) > NAME_SIZE:
        raise ValueError(f"Tar entry name must be 1-{NAME_SIZE} bytes: {name!r}")
    if mtime is None:
        mtime = int(time.time())

    header = bytearray(BLOCK_SIZE)
    header[0:len(encoded_name)] = encoded_name
    header[100:108] = _octal(0o644, 8)
    header[108:116] = _octal(0, 8)
    header[116:124] = _octal(0, 8)
    header[124:136] = _octal(size, 12)
    header[136:148] = _octal(mtime, 12)

    checksum = format(header_checksum(header), "o").zfill(6).encode("ascii")
    header[_CHECKSUM_OFFSET:_CHECKSUM_OFFSET + _CHECKSUM_SIZE] = checksum + b"\0 "
    return bytes(header)


def padding_for(size: int) -> bytes:
    """Zero bytes up to the next block boundary."""
    remainder = size % BLOCK_SIZE
    return b"\0" * (BLOCK_SIZE - remainder) if remainder else b""


class TarWriter:
    """
    Appends entries to a binary stream and terminates it on close.

    Usage:
        with TarWriter(stream) as tar:
            tar.add_file("a.jpg", data)
    """

    def __init__(self, stream: BinaryIO, mtime: Optional[int] = None):
        self.stream = stream
        self.mtime = mtime
        self.entries = 0
        self.closed = False

    def add_file(self, name: str, content: bytes):
        if self.closed:
            raise ValueError("TarWriter is closed")
        self.stream.write(build_header(name, len(content), self.mtime))
        self.stream.write(content)
        self.stream.write(padding_for(len(content)))
        self.entries += 1

    def add_path(self, name: str, path: str):
        """Append a staged file from disk under the given entry name."""
        with open(path, "rb") as f:
            self.add_file(name, f.read())

    def close(self):
        if not self.closed:
            self.stream.write(END_OF_ARCHIVE)
            self.closed = True

    def __enter__(self) -> "TarWriter":
        return self

    def __exit__(self, exc_type, exc, tb):
        # A failed archive is not terminated; the caller discards it
        if exc_type is None:
            self.close()


def encode_archive(
    entries: Iterable[Tuple[str, bytes]],
    compression_level: int = 6,
    mtime: Optional[int] = None
) -> bytes:
    """Gzipped tar of (name, content) pairs, built in memory."""
    buffer = io.BytesIO()
    with gzip.GzipFile(fileobj=buffer, mode="wb", compresslevel=compression_level) as gz:
        with TarWriter(gz, mtime=mtime) as tar:
            for name, content in entries:
                tar.add_file(name, content)
    return buffer.getvalue()
