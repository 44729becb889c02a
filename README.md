# kafkacodec

Compression codecs used for Kafka message sets, with no third-party
dependencies.

It provides:

- `kafkacodec.compression.Compression`: an `IntEnum` of the compression
  types a message's attributes can carry (`NONE = 0`, `GZIP = 1`,
  `SNAPPY = 2`), with `Compression.default()` returning `NONE`.
- `kafkacodec.gzip_codec`: `compress(src)` and `uncompress(src)` for gzip
  payloads. `compress` uses compression level 9 and a zero modification
  time, so equal input gives equal output. `uncompress` accepts bytes-like
  data or a readable binary stream.
- `kafkacodec.snappy_codec`: raw snappy block `compress(src)`,
  `uncompress(src)` and `decompress_len(src)`, plus `validate_stream` and
  `SnappyReader` for the chunked stream format that starts with the
  `\x82SNAPPY\x00` header followed by a version and a compatibility value,
  both 32-bit big-endian and both required to be 1. After the header the
  stream is a sequence of chunks, each a 32-bit big-endian length followed
  by that many bytes of raw snappy data.
- `kafkacodec.errors`: `CompressionError` and its subclasses
  `UnexpectedEOFError` and `InvalidSnappyError`.

## Installation

```
pip install kafkacodec
```

## Usage

```python
from kafkacodec import gzip_codec, snappy_codec
from kafkacodec.compression import Compression

packed = gzip_codec.compress(b"test")
assert gzip_codec.uncompress(packed) == b"test"

block = snappy_codec.compress(b"This is test")
assert snappy_codec.decompress_len(block) == 12
assert snappy_codec.uncompress(block) == b"This is test"

assert Compression.default() is Compression.NONE
```

`validate_stream(stream)` checks the header of a chunked stream and returns
the bytes that follow it.

`SnappyReader` reads a chunked stream either in pieces, all at once, or
one decompressed chunk at a time:

```python
from kafkacodec.snappy_codec import SnappyReader

reader = SnappyReader(stream_bytes)
while chunk := reader.read(1024):
    handle(chunk)

data = SnappyReader(stream_bytes).read_to_end()

for piece in SnappyReader(stream_bytes):
    handle(piece)
```

`read(size)` returns at most `size` bytes and `b""` once the stream is
exhausted; a negative `size` returns everything that remains, as
`read_to_end()` does.

## Errors

- Gzip input that cannot be decompressed raises `CompressionError`.
- A stream too short for its header, or one that ends inside a length
  prefix or a chunk, raises `UnexpectedEOFError`.
- A bad magic, a version or compatibility other than 1, a chunk length of
  zero or less, or corrupt raw snappy data raises `InvalidSnappyError`.

Both subclasses derive from `CompressionError`.

## What it does not do

The package only encodes and decodes payloads. It does not talk to Kafka
brokers, build or parse message sets, or offer a command-line tool. For
snappy it writes raw blocks only; chunked streams can be read but not
written.

## Running the tests

```
pip install -e ".[test]"
pytest
```