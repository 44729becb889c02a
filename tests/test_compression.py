import pytest

from kafkacodec.compression import Compression


def test_default_is_none():
    assert Compression.default() is Compression.NONE


@pytest.mark.parametrize(
    "codec, value",
    [(Compression.NONE, 0), (Compression.GZIP, 1), (Compression.SNAPPY, 2)],
)
def test_wire_values(codec, value):
    assert int(codec) == value
    assert Compression(value) is codec


def test_unknown_value_rejected():
    with pytest.raises(ValueError):
        Compression(7)


def test_lookup_by_name():
    default = Compression.default()
    assert default.name == "NONE"
    assert Compression[default.name] is Compression.NONE
    assert Compression["SNAPPY"] is Compression.SNAPPY