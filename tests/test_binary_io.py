from io import BytesIO

import pytest

from protoavro.io import BinaryDecoder, BinaryEncoder


def encode(fn, *args):
    fo = BytesIO()
    getattr(BinaryEncoder(fo), fn)(*args)
    return fo.getvalue()


def decoder(data):
    return BinaryDecoder(BytesIO(data))


@pytest.mark.parametrize(
    "value,expected",
    [
        (0, b"\x00"),
        (-1, b"\x01"),
        (1, b"\x02"),
        (-64, b"\x7f"),
        (64, b"\x80\x01"),
        (2**63 - 1, b"\xfe\xff\xff\xff\xff\xff\xff\xff\xff\x01"),
        (-(2**63), b"\xff\xff\xff\xff\xff\xff\xff\xff\xff\x01"),
    ],
)
def test_zigzag_varint(value, expected):
    assert encode("write_long", value) == expected
    assert decoder(expected).read_long() == value


def test_primitives():
    fo = BytesIO()
    encoder = BinaryEncoder(fo)
    encoder.write_bool(True)
    encoder.write_int(150)
    encoder.write_float(0.5)
    encoder.write_double(-2.5)
    encoder.write_string("hé")
    encoder.write_bytes(b"\x00\xff")
    encoder.write_fixed(b"xy")

    dec = decoder(fo.getvalue())
    assert dec.read_bool() is True
    assert dec.read_int() == 150
    assert dec.read_float() == 0.5
    assert dec.read_double() == -2.5
    assert dec.read_string() == "hé"
    assert dec.read_bytes() == b"\x00\xff"
    assert dec.read_fixed(2) == b"xy"


class Recorder:
    def __init__(self):
        self.writes = []

    def write(self, data):
        self.writes.append(bytes(data))


def test_one_write_per_primitive():
    fo = Recorder()
    encoder = BinaryEncoder(fo)
    encoder.write_long(2**40)
    encoder.write_bytes(b"abc")
    encoder.write_bool(False)
    encoder.write_array_end()

    assert fo.writes == [b"\x80\x80\x80\x80\x80\x40", b"\x06abc", b"\x00", b"\x00"]


def test_write_utf8_rejects_non_strings():
    with pytest.raises(TypeError, match="must be string"):
        encode("write_utf8", 12)


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"\x80",
        b"\x06ab",
        b"\x00\x00\x80",
    ],
)
def test_short_reads(data):
    dec = decoder(data)
    with pytest.raises(EOFError):
        dec.read_string()
        dec.read_double()


def test_negative_length():
    with pytest.raises(EOFError, match="negative length"):
        decoder(b"\x01").read_bytes()


def test_nested_block_iteration():
    # [[1, 2], [3]] with the inner arrays split across blocks
    data = b"\x04" + b"\x02\x02\x02\x04\x00" + b"\x01\x02\x06\x00" + b"\x00"
    dec = decoder(data)

    result = []
    for _ in dec.iter_array():
        inner = []
        for _ in dec.iter_array():
            inner.append(dec.read_int())
        result.append(inner)

    assert result == [[1, 2], [3]]


def test_index():
    assert encode("write_index", 3, "int") == b"\x06"
    assert decoder(b"\x06").read_index() == 3
