PRIMITIVES = {
    "boolean",
    "bytes",
    "double",
    "float",
    "int",
    "long",
    "null",
    "string",
}

NAMED_TYPES = {"record", "enum", "fixed", "error"}

# Two's complement bounds used when truncating unsigned values onto Avro's
# signed int and long
INT_MIN_VALUE = -(1 << 31)
INT_MAX_VALUE = (1 << 31) - 1
LONG_MIN_VALUE = -(1 << 63)
LONG_MAX_VALUE = (1 << 63) - 1

UINT32_MASK = (1 << 32) - 1
UINT64_MASK = (1 << 64) - 1
