"""Exceptions raised by the compression codecs."""


class CompressionError(Exception):
    """Base class for every error raised while compressing or decompressing."""


class UnexpectedEOFError(CompressionError):
    """The input ended before a complete structure could be read."""


class InvalidSnappyError(CompressionError):
    """The input is not valid snappy data or not a supported snappy stream."""