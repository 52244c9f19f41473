from struct import Struct

_float = Struct("<f")
_double = Struct("<d")

_TRUE = b"\x01"
_FALSE = b"\x00"


def encode_long(n):
    """Zigzag varint bytes of n."""
    n = (n << 1) ^ (n >> 63)
    buf = bytearray()
    while n & ~0x7F:
        buf.append((n & 0x7F) | 0x80)
        n >>= 7
    buf.append(n)
    return bytes(buf)


class BinaryEncoder:
    """Encoder for the avro binary format.

    This is the primitive writer handed to custom marshalers: every method
    writes one avro primitive (or one piece of block framing) to the
    underlying stream with a single ``write`` call.

    Parameters
    ----------
    fo: file-like
        Output stream

    """

    def __init__(self, fo):
        self._fo = fo

    def flush(self):
        pass

    def write_null(self):
        pass

    def write_boolean(self, datum):
        self._fo.write(_TRUE if datum else _FALSE)

    write_bool = write_boolean

    def write_long(self, datum):
        self._fo.write(encode_long(datum))

    write_int = write_long

    def write_float(self, datum):
        self._fo.write(_float.pack(datum))

    def write_double(self, datum):
        self._fo.write(_double.pack(datum))

    def write_bytes(self, datum):
        self._fo.write(encode_long(len(datum)) + bytes(datum))

    def write_utf8(self, datum):
        if not isinstance(datum, str):
            raise TypeError("must be string")
        self.write_bytes(datum.encode())

    write_string = write_utf8

    def write_fixed(self, datum):
        self._fo.write(datum)

    def write_enum(self, index):
        self.write_long(index)

    # Producers emit one block per array or map: the item count, the items,
    # then the terminating zero count.

    def write_array_start(self):
        pass

    def write_item_count(self, length):
        self.write_long(length)

    def end_item(self):
        pass

    def write_array_end(self):
        self._fo.write(_FALSE)

    write_map_start = write_array_start
    write_map_end = write_array_end

    def write_index(self, index, schema=None):
        """Union branch index, schema is the chosen branch."""
        self.write_long(index)
