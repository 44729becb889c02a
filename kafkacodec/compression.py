"""Compression types understood by the message protocol."""

from enum import IntEnum


class Compression(IntEnum):
    """Compression codec; values match the message attribute encoding."""

    NONE = 0
    GZIP = 1
    SNAPPY = 2

    @classmethod
    def default(cls) -> "Compression":
        """Return the codec used when none is configured."""
        return cls.NONE