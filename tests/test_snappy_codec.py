import struct

import pytest
from hypothesis import given
from hypothesis import strategies as st

from kafkacodec.errors import InvalidSnappyError, UnexpectedEOFError
from kafkacodec.snappy_codec import (
    SnappyReader,
    compress,
    decompress_len,
    uncompress,
    validate_stream,
)

COMPRESSED_TEST = bytes([12, 44, 84, 104, 105, 115, 32, 105, 115, 32, 116, 101, 115, 116])
HEADER = bytes([0x82, 0x53, 0x4E, 0x41, 0x50, 0x50, 0x59, 0x00, 0, 0, 0, 1, 0, 0, 0, 1])

ORIGINAL = "".join(
    f"line {n}: the quick brown fox jumps over the lazy dog {n * 7}\n" for n in range(600)
)


def _chunked(data: bytes, chunk_size: int = 4096) -> bytes:
    parts = [HEADER]
    for start in range(0, len(data), chunk_size):
        piece = compress(data[start:start + chunk_size])
        parts.append(struct.pack(">i", len(piece)) + piece)
    return b"".join(parts)


COMPRESSED_STREAM = _chunked(ORIGINAL.encode("utf-8"))


def test_compress():
    assert compress(b"This is test") == COMPRESSED_TEST


def test_uncompress():
    assert uncompress(COMPRESSED_TEST).decode("utf-8") == "This is test"


def test_uncompress_invalid_input():
    bad = bytes([12, 42, 84, 104, 105, 115, 32, 105, 115, 32, 116, 101, 115, 116])
    with pytest.raises(InvalidSnappyError):
        uncompress(bad)


def test_uncompress_truncated():
    with pytest.raises(InvalidSnappyError):
        uncompress(COMPRESSED_TEST[:-3])


def test_uncompress_empty():
    assert uncompress(b"") == b""


def test_decompress_len():
    assert decompress_len(COMPRESSED_TEST) == 12
    assert decompress_len(b"") == 0


def test_decompress_len_bad_varint():
    with pytest.raises(InvalidSnappyError):
        decompress_len(b"\x80")


def test_repetitive_data_shrinks():
    data = b"abcdefgh" * 20000
    packed = compress(data)
    assert len(packed) < len(data) // 10
    assert uncompress(packed) == data


@given(st.binary(max_size=3000))
def test_round_trip(data):
    assert uncompress(compress(data)) == data


@given(st.lists(st.sampled_from([b"ab", b"xyz", b"\x00" * 9, b"q"]), max_size=400))
def test_round_trip_with_repeats(pieces):
    data = b"".join(pieces)
    assert uncompress(compress(data)) == data


def test_validate_stream():
    assert validate_stream(HEADER + bytes([0x56])) == bytes([0x56])


def test_validate_stream_short():
    with pytest.raises(UnexpectedEOFError):
        validate_stream(HEADER[:5])


def test_validate_stream_missing_compat():
    with pytest.raises(UnexpectedEOFError):
        validate_stream(HEADER[:13])


def test_validate_stream_bad_magic():
    with pytest.raises(InvalidSnappyError):
        validate_stream(b"\x83" + HEADER[1:])


def test_validate_stream_bad_version():
    with pytest.raises(InvalidSnappyError):
        validate_stream(HEADER[:8] + struct.pack(">ii", 2, 1))


def test_snappy_reader_read():
    reader = SnappyReader(COMPRESSED_STREAM)
    buf = bytearray()
    while True:
        piece = reader.read(1024)
        if not piece:
            break
        assert len(piece) <= 1024
        buf += piece
    assert buf.decode("utf-8") == ORIGINAL


def test_snappy_reader_read_to_end():
    reader = SnappyReader(COMPRESSED_STREAM)
    assert reader.read_to_end().decode("utf-8") == ORIGINAL


def test_snappy_reader_mixed_reads():
    reader = SnappyReader(COMPRESSED_STREAM)
    head = reader.read(100)
    rest = reader.read()
    assert (head + rest).decode("utf-8") == ORIGINAL
    assert reader.read(10) == b""


def test_snappy_reader_iter():
    reader = SnappyReader(COMPRESSED_STREAM)
    chunks = list(reader)
    assert len(chunks) > 1
    assert b"".join(chunks).decode("utf-8") == ORIGINAL


def test_snappy_reader_empty_stream():
    assert SnappyReader(HEADER).read_to_end() == b""


@pytest.mark.parametrize("size", [0, -5])
def test_snappy_reader_bad_chunk_size(size):
    reader = SnappyReader(HEADER + struct.pack(">i", size))
    with pytest.raises(InvalidSnappyError):
        reader.read(10)


def test_snappy_reader_truncated_chunk():
    reader = SnappyReader(COMPRESSED_STREAM[:-5])
    with pytest.raises(UnexpectedEOFError):
        reader.read_to_end()