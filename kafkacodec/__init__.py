"""Gzip and snappy compression codecs for Kafka message sets."""

__version__ = "0.1.0"
__all__ = ["compression", "errors", "gzip_codec", "snappy_codec"]