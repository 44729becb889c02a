"""Gzip compression of message payloads."""

import gzip
import zlib
from typing import BinaryIO, Union

from .errors import CompressionError


def compress(src: bytes) -> bytes:
    """Compress ``src`` with gzip at the best compression level."""
    return gzip.compress(bytes(src), compresslevel=9, mtime=0)


def uncompress(src: Union[bytes, bytearray, memoryview, BinaryIO]) -> bytes:
    """Decompress gzip data given as bytes or as a readable binary stream."""
    data = src.read() if hasattr(src, "read") else bytes(src)
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as exc:
        raise CompressionError(f"invalid gzip data: {exc}") from exc