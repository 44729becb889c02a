"""Raw snappy compression and the chunked snappy stream format."""

import struct
from typing import Iterator, Union

from .errors import InvalidSnappyError, UnexpectedEOFError

BytesLike = Union[bytes, bytearray, memoryview]

MAGIC = b"\x82SNAPPY\x00"

_BLOCK_SIZE = 1 << 16
_INPUT_MARGIN = 15
_MAX_LENGTH = 0xFFFFFFFF


# --------------------------------------------------------------------
# raw snappy


def _write_varint(out: bytearray, value: int) -> None:
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)


def _read_varint(src: bytes) -> tuple:
    value = 0
    for pos, byte in enumerate(src[:5]):
        value |= (byte & 0x7F) << (7 * pos)
        if byte < 0x80:
            if value > _MAX_LENGTH:
                raise InvalidSnappyError("decompressed length too large")
            return value, pos + 1
    raise InvalidSnappyError("invalid snappy length header")


def _emit_literal(out: bytearray, literal: bytes) -> None:
    n = len(literal) - 1
    if n < 60:
        out.append(n << 2)
    else:
        width = (n.bit_length() + 7) // 8
        out.append((59 + width) << 2)
        out += n.to_bytes(width, "little")
    out += literal


def _emit_copy_piece(out: bytearray, offset: int, length: int) -> None:
    if 4 <= length < 12 and offset < 2048:
        out.append(((offset >> 8) << 5) | ((length - 4) << 2) | 1)
        out.append(offset & 0xFF)
    else:
        out.append(((length - 1) << 2) | 2)
        out += offset.to_bytes(2, "little")


def _emit_copy(out: bytearray, offset: int, length: int) -> None:
    while length >= 68:
        _emit_copy_piece(out, offset, 64)
        length -= 64
    if length > 64:
        _emit_copy_piece(out, offset, 60)
        length -= 60
    _emit_copy_piece(out, offset, length)


def _compress_block(block: bytes, out: bytearray) -> None:
    size = len(block)
    if size < _INPUT_MARGIN:
        if size:
            _emit_literal(out, block)
        return
    table = {}
    literal_start = 0
    pos = 0
    while pos <= size - 4:
        key = block[pos:pos + 4]
        candidate = table.get(key)
        table[key] = pos
        if candidate is None:
            pos += 1
            continue
        if literal_start < pos:
            _emit_literal(out, block[literal_start:pos])
        length = 4
        while pos + length < size and block[candidate + length] == block[pos + length]:
            length += 1
        _emit_copy(out, pos - candidate, length)
        pos += length
        literal_start = pos
    if literal_start < size:
        _emit_literal(out, block[literal_start:])


def compress(src: BytesLike) -> bytes:
    """Compress ``src`` into the raw snappy format."""
    data = bytes(src)
    out = bytearray()
    _write_varint(out, len(data))
    for start in range(0, len(data), _BLOCK_SIZE):
        _compress_block(data[start:start + _BLOCK_SIZE], out)
    return bytes(out)


def decompress_len(src: BytesLike) -> int:
    """Return the decompressed length announced by raw snappy data."""
    data = bytes(src)
    if not data:
        return 0
    return _read_varint(data)[0]


def _decompress(src: bytes, expected: int, pos: int, out: bytearray) -> None:
    start = len(out)
    end = len(src)

    def take(count: int) -> bytes:
        nonlocal pos
        if pos + count > end:
            raise InvalidSnappyError("snappy data ends inside an element")
        chunk = src[pos:pos + count]
        pos += count
        return chunk

    while pos < end:
        tag = src[pos]
        pos += 1
        kind = tag & 3
        if kind == 0:
            length = tag >> 2
            if length >= 60:
                length = int.from_bytes(take(length - 59), "little")
            out += take(length + 1)
        else:
            if kind == 1:
                length = ((tag >> 2) & 7) + 4
                offset = ((tag >> 5) << 8) | take(1)[0]
            elif kind == 2:
                length = (tag >> 2) + 1
                offset = int.from_bytes(take(2), "little")
            else:
                length = (tag >> 2) + 1
                offset = int.from_bytes(take(4), "little")
            produced = len(out) - start
            if offset == 0 or offset > produced:
                raise InvalidSnappyError(f"invalid copy offset {offset}")
            copy_from = len(out) - offset
            if offset >= length:
                out += out[copy_from:copy_from + length]
            else:
                pattern = bytes(out[copy_from:])
                out += (pattern * (length // offset + 1))[:length]
        if len(out) - start > expected:
            raise InvalidSnappyError("snappy data exceeds announced length")
    if len(out) - start != expected:
        raise InvalidSnappyError("snappy data shorter than announced length")


def _uncompress_into(src: bytes, out: bytearray) -> None:
    if not src:
        return
    expected, pos = _read_varint(src)
    if expected > 0:
        _decompress(src, expected, pos, out)


def uncompress(src: BytesLike) -> bytes:
    """Decompress raw snappy data."""
    out = bytearray()
    _uncompress_into(bytes(src), out)
    return bytes(out)


# --------------------------------------------------------------------
# chunked snappy stream


def _next_i32(data: bytes, pos: int) -> int:
    if len(data) - pos < 4:
        raise UnexpectedEOFError("stream ends inside a 32-bit value")
    return struct.unpack_from(">i", data, pos)[0]


def validate_stream(stream: BytesLike) -> bytes:
    """Check the stream header (magic, version 1, compatibility 1); return the rest."""
    data = bytes(stream)
    if len(data) < len(MAGIC):
        raise UnexpectedEOFError("stream too short for the snappy header")
    if data[:len(MAGIC)] != MAGIC:
        raise InvalidSnappyError("bad snappy stream magic")
    pos = len(MAGIC)
    version = _next_i32(data, pos)
    pos += 4
    if version != 1:
        raise InvalidSnappyError(f"unsupported snappy stream version {version}")
    compat = _next_i32(data, pos)
    pos += 4
    if compat != 1:
        raise InvalidSnappyError(f"unsupported snappy stream compatibility {compat}")
    return data[pos:]


class SnappyReader:
    """Reads a stream of length-prefixed snappy chunks as one byte stream."""

    def __init__(self, stream: BytesLike) -> None:
        self._data = validate_stream(stream)
        self._pos = 0
        self._chunk = b""
        self._chunk_pos = 0

    def _next_compressed(self) -> bytes:
        size = _next_i32(self._data, self._pos)
        if size <= 0:
            raise InvalidSnappyError(f"unsupported chunk length {size}")
        start = self._pos + 4
        if start + size > len(self._data):
            raise UnexpectedEOFError("stream ends inside a chunk")
        self._pos = start + size
        return self._data[start:start + size]

    def _has_compressed(self) -> bool:
        return self._pos < len(self._data)

    def read(self, size: int = -1) -> bytes:
        """Return up to ``size`` bytes, all remaining bytes if negative; b"" at the end."""
        if size < 0:
            return self.read_to_end()
        if size == 0:
            return b""
        while self._chunk_pos >= len(self._chunk):
            if not self._has_compressed():
                return b""
            self._chunk = uncompress(self._next_compressed())
            self._chunk_pos = 0
        result = self._chunk[self._chunk_pos:self._chunk_pos + size]
        self._chunk_pos += len(result)
        return result

    def read_to_end(self) -> bytes:
        """Return every remaining decompressed byte."""
        out = bytearray(self._chunk[self._chunk_pos:])
        self._chunk = b""
        self._chunk_pos = 0
        while self._has_compressed():
            _uncompress_into(self._next_compressed(), out)
        return bytes(out)

    def __iter__(self) -> Iterator[bytes]:
        """Yield the remaining data one decompressed chunk at a time."""
        rest = self._chunk[self._chunk_pos:]
        self._chunk = b""
        self._chunk_pos = 0
        if rest:
            yield rest
        while self._has_compressed():
            chunk = uncompress(self._next_compressed())
            if chunk:
                yield chunk