from struct import unpack


class BinaryDecoder:
    """Decoder for the avro binary format.

    This is the primitive reader handed to custom unmarshalers. Reading past
    the end of the stream raises ``EOFError``.

    Parameters
    ----------
    fo: file-like
        Input stream

    """

    def __init__(self, fo):
        self.fo = fo

    def _read(self, size):
        data = self.fo.read(size)
        if len(data) != size:
            raise EOFError(f"expected {size} bytes, got {len(data)} from {self.fo}")
        return data

    def read_null(self):
        """null is written as zero bytes."""
        return None

    def read_boolean(self):
        """A boolean is written as a single byte whose value is either 0
        (false) or 1 (true).
        """

        # technically 0x01 == true and 0x00 == false, but many languages will
        # cast anything other than 0 to True and only 0 to False
        return self._read(1)[0] != 0

    read_bool = read_boolean

    def read_long(self):
        """int and long values are written using variable-length, zig-zag
        coding."""
        b = self._read(1)[0]
        n = b & 0x7F
        shift = 7

        while (b & 0x80) != 0:
            b = self._read(1)[0]
            n |= (b & 0x7F) << shift
            shift += 7

        return (n >> 1) ^ -(n & 1)

    read_int = read_long

    def read_float(self):
        """A float is written as 4 bytes.

        The float is converted into a 32-bit integer using a method equivalent
        to Java's floatToIntBits and then encoded in little-endian format.
        """
        return unpack("<f", self._read(4))[0]

    def read_double(self):
        """A double is written as 8 bytes.

        The double is converted into a 64-bit integer using a method equivalent
        to Java's doubleToLongBits and then encoded in little-endian format.
        """
        return unpack("<d", self._read(8))[0]

    def read_bytes(self):
        """Bytes are encoded as a long followed by that many bytes of data."""
        size = self.read_long()
        if size < 0:
            raise EOFError(f"negative length {size} read from {self.fo}")
        return self._read(size)

    def read_utf8(self):
        """A string is encoded as a long followed by that many bytes of UTF-8
        encoded character data.
        """
        return self.read_bytes().decode()

    read_string = read_utf8

    def read_fixed(self, size):
        """Fixed instances are encoded using the number of bytes declared in the
        schema."""
        return self._read(size)

    def read_enum(self):
        """An enum is encoded by a int, representing the zero-based position of
        the symbol in the schema.
        """
        return self.read_long()

    def iter_array(self):
        """Arrays and maps are encoded as a series of blocks.

        Each block consists of a long count value, followed by that many
        items. A block with count zero indicates the end of the array.

        If a block's count is negative, then the count is followed immediately
        by a long block size, indicating the number of bytes in the block.
        The actual count in this case is the absolute value of the count
        written.

        The block count lives in this generator rather than on the decoder so
        nested arrays and maps can be iterated at the same time.
        """
        block_count = self.read_long()
        while block_count != 0:
            if block_count < 0:
                block_count = -block_count
                # Read block size, unused
                self.read_long()

            for i in range(block_count):
                yield
            block_count = self.read_long()

    iter_map = iter_array

    def read_index(self):
        """A union is encoded by first writing a long value indicating the
        zero-based position within the union of the schema of its value.

        The value is then encoded per the indicated schema within the union.
        """
        return self.read_long()
