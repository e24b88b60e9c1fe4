import gzip
import io
import tarfile

import pytest

from services.archive.tar_writer import (
    BLOCK_SIZE,
    TarWriter,
    build_header,
    encode_archive,
    header_checksum,
)


def test_header_layout():
    header = build_header("photo.jpg", 5, mtime=0o17)

    assert len(header) == BLOCK_SIZE
    assert header[:9] == b"photo.jpg"
    assert header[9:100] == b"\0" * 91
    assert header[100:108] == b"0000644\0"
    assert header[108:116] == b"0000000\0"
    assert header[116:124] == b"0000000\0"
    assert header[124:136] == b"00000000005\0"
    assert header[136:148] == b"00000000017\0"
    assert header[154:156] == b"\0 "
    assert header[156:] == b"\0" * (BLOCK_SIZE - 156)


def test_header_checksum_counts_field_as_spaces():
    header = build_header("a.png", 1234, mtime=1700000000)

    written = int(header[148:154].decode("ascii"), 8)
    blanked = header[:148] + b" " * 8 + header[156:]

    assert written == sum(blanked)
    assert written == header_checksum(header)


def test_name_too_long_is_rejected():
    with pytest.raises(ValueError):
        build_header("x" * 101, 1)


def test_name_of_exactly_100_bytes_fits():
    header = build_header("y" * 100, 1)
    assert header[:100] == b"y" * 100


def test_content_padded_to_block_boundary_and_terminated():
    stream = io.BytesIO()
    with TarWriter(stream, mtime=0) as tar:
        tar.add_file("one.jpg", b"abc")
        tar.add_file("two.jpg", b"x" * BLOCK_SIZE)

    data = stream.getvalue()
    # header + 1 padded block, header + exactly 1 block, 2 end blocks
    assert len(data) == BLOCK_SIZE * 6
    assert data[BLOCK_SIZE:BLOCK_SIZE + 3] == b"abc"
    assert data[BLOCK_SIZE + 3:BLOCK_SIZE * 2] == b"\0" * (BLOCK_SIZE - 3)
    assert data[-BLOCK_SIZE * 2:] == b"\0" * (BLOCK_SIZE * 2)
    assert tar.entries == 2


def test_empty_file_has_no_content_blocks():
    stream = io.BytesIO()
    with TarWriter(stream) as tar:
        tar.add_file("empty.jpg", b"")

    assert len(stream.getvalue()) == BLOCK_SIZE * 3


def test_writer_refuses_entries_after_close():
    tar = TarWriter(io.BytesIO())
    tar.close()
    with pytest.raises(ValueError):
        tar.add_file("late.jpg", b"1")


def test_standard_reader_round_trip():
    entries = [
        ("Jane_Doe_Wedding_001.jpg", b"\xff\xd8jpeg-bytes" * 100),
        ("Jane_Doe_Wedding_002.png", b"\x89PNG" + bytes(range(256)) * 3),
        ("Jane_Doe_Wedding_003.jpg", b"z"),
    ]

    archive = encode_archive(entries)

    with tarfile.open(fileobj=io.BytesIO(archive), mode="r:gz") as tar:
        members = tar.getmembers()
        assert [m.name for m in members] == [name for name, _ in entries]
        for member, (_, content) in zip(members, entries):
            assert member.isfile()
            assert member.mode == 0o644
            assert tar.extractfile(member).read() == content


def test_archive_is_gzip():
    archive = encode_archive([("a.jpg", b"1")])
    assert archive[:2] == b"\x1f\x8b"
    assert len(gzip.decompress(archive)) == BLOCK_SIZE * 4
