"""Generic reading of avro binary data into python dicts and lists, and
schema-shaped skipping of data nobody asked for."""

# This code is a modified version of the code at
# http://svn.apache.org/viewvc/avro/trunk/lang/py/src/avro/ which is under
# Apache 2.0 license (http://www.apache.org/licenses/LICENSE-2.0)

from .errors import InvalidUnionIndex
from .schema import extract_record_type, UnknownType


def read_null(decoder, writer_schema, named_schemas):
    return decoder.read_null()


def skip_null(decoder, writer_schema, named_schemas):
    decoder.read_null()


def read_boolean(decoder, writer_schema, named_schemas):
    return decoder.read_boolean()


def skip_boolean(decoder, writer_schema, named_schemas):
    decoder.read_boolean()


def read_int(decoder, writer_schema, named_schemas):
    return decoder.read_int()


def read_long(decoder, writer_schema, named_schemas):
    return decoder.read_long()


def skip_long(decoder, writer_schema, named_schemas):
    decoder.read_long()


def read_float(decoder, writer_schema, named_schemas):
    return decoder.read_float()


def skip_float(decoder, writer_schema, named_schemas):
    decoder.read_float()


def read_double(decoder, writer_schema, named_schemas):
    return decoder.read_double()


def skip_double(decoder, writer_schema, named_schemas):
    decoder.read_double()


def read_bytes(decoder, writer_schema, named_schemas):
    return decoder.read_bytes()


def skip_bytes(decoder, writer_schema, named_schemas):
    decoder.read_bytes()


def read_utf8(decoder, writer_schema, named_schemas):
    return decoder.read_utf8()


def read_fixed(decoder, writer_schema, named_schemas):
    return decoder.read_fixed(writer_schema["size"])


def skip_fixed(decoder, writer_schema, named_schemas):
    decoder.read_fixed(writer_schema["size"])


def read_enum(decoder, writer_schema, named_schemas):
    index = decoder.read_enum()
    symbols = writer_schema["symbols"]
    if not 0 <= index < len(symbols):
        raise ValueError(f"enum index {index} out of range for {symbols}")
    return symbols[index]


def read_array(decoder, writer_schema, named_schemas):
    items = writer_schema["items"]
    return [read_data(decoder, items, named_schemas) for _ in decoder.iter_array()]


def skip_array(decoder, writer_schema, named_schemas):
    for item in decoder.iter_array():
        skip_data(decoder, writer_schema["items"], named_schemas)


def read_map(decoder, writer_schema, named_schemas):
    read_items = {}
    values = writer_schema["values"]

    for item in decoder.iter_map():
        key = decoder.read_utf8()
        read_items[key] = read_data(decoder, values, named_schemas)

    return read_items


def skip_map(decoder, writer_schema, named_schemas):
    for item in decoder.iter_map():
        decoder.read_utf8()
        skip_data(decoder, writer_schema["values"], named_schemas)


def _union_branch(decoder, writer_schema, fname=""):
    index = decoder.read_index()
    if not 0 <= index < len(writer_schema):
        raise InvalidUnionIndex(index, fname, len(writer_schema))
    return writer_schema[index]


def read_union(decoder, writer_schema, named_schemas):
    """A union is encoded by first writing a long value indicating the
    zero-based position within the union of the schema of its value. The
    value is then encoded per the indicated schema within the union."""
    return read_data(decoder, _union_branch(decoder, writer_schema), named_schemas)


def skip_union(decoder, writer_schema, named_schemas):
    skip_data(decoder, _union_branch(decoder, writer_schema), named_schemas)


def read_record(decoder, writer_schema, named_schemas):
    """A record is encoded by encoding the values of its fields in the order
    that they are declared. In other words, a record is encoded as just the
    concatenation of the encodings of its fields.  Field values are encoded per
    their schema."""
    return {
        field["name"]: read_data(decoder, field["type"], named_schemas)
        for field in writer_schema["fields"]
    }


def skip_record(decoder, writer_schema, named_schemas):
    for field in writer_schema["fields"]:
        skip_data(decoder, field["type"], named_schemas)


READERS = {
    "null": read_null,
    "boolean": read_boolean,
    "string": read_utf8,
    "int": read_int,
    "long": read_long,
    "float": read_float,
    "double": read_double,
    "bytes": read_bytes,
    "fixed": read_fixed,
    "enum": read_enum,
    "array": read_array,
    "map": read_map,
    "union": read_union,
    "record": read_record,
    "error": read_record,
}

SKIPS = {
    "null": skip_null,
    "boolean": skip_boolean,
    "string": skip_bytes,
    "int": skip_long,
    "long": skip_long,
    "float": skip_float,
    "double": skip_double,
    "bytes": skip_bytes,
    "fixed": skip_fixed,
    "enum": skip_long,
    "array": skip_array,
    "map": skip_map,
    "union": skip_union,
    "record": skip_record,
    "error": skip_record,
}


def read_data(decoder, writer_schema, named_schemas):
    """Read data from decoder according to schema."""

    record_type = extract_record_type(writer_schema)

    reader_fn = READERS.get(record_type)
    if reader_fn:
        return reader_fn(decoder, writer_schema, named_schemas)
    elif record_type in named_schemas:
        return read_data(decoder, named_schemas[record_type], named_schemas)
    else:
        raise UnknownType(record_type)


def skip_data(decoder, writer_schema, named_schemas):
    """Advance the decoder past one value of writer_schema without building
    it."""
    record_type = extract_record_type(writer_schema)

    skip_fn = SKIPS.get(record_type)
    if skip_fn:
        skip_fn(decoder, writer_schema, named_schemas)
    elif record_type in named_schemas:
        skip_data(decoder, named_schemas[record_type], named_schemas)
    else:
        raise UnknownType(record_type)
