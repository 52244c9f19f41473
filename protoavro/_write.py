"""Generic writing of python dicts and lists as avro binary data.

This is the mapping used when the codec selector has nothing more specific
for a value: records are dicts, arrays are sequences, maps are dicts with
string keys and enums are their symbol strings.
"""

# This code is a modified version of the code at
# http://svn.apache.org/viewvc/avro/trunk/lang/py/src/avro/ which is under
# Apache 2.0 license (http://www.apache.org/licenses/LICENSE-2.0)

from collections.abc import Mapping

from .const import NAMED_TYPES
from .schema import extract_record_type, UnknownType
from .validation import validate


def write_null(encoder, datum, schema, named_schemas, fname, options):
    """null is written as zero bytes"""
    encoder.write_null()


def write_boolean(encoder, datum, schema, named_schemas, fname, options):
    """A boolean is written as a single byte whose value is either 0 (false) or
    1 (true)."""
    encoder.write_boolean(datum)


def write_int(encoder, datum, schema, named_schemas, fname, options):
    """int and long values are written using variable-length, zig-zag coding."""
    encoder.write_int(datum)


def write_long(encoder, datum, schema, named_schemas, fname, options):
    """int and long values are written using variable-length, zig-zag coding."""
    encoder.write_long(datum)


def write_float(encoder, datum, schema, named_schemas, fname, options):
    """A float is written as 4 bytes.  The float is converted into a 32-bit
    integer using a method equivalent to Java's floatToIntBits and then encoded
    in little-endian format."""
    encoder.write_float(datum)


def write_double(encoder, datum, schema, named_schemas, fname, options):
    """A double is written as 8 bytes.  The double is converted into a 64-bit
    integer using a method equivalent to Java's doubleToLongBits and then
    encoded in little-endian format."""
    encoder.write_double(datum)


def write_bytes(encoder, datum, schema, named_schemas, fname, options):
    """Bytes are encoded as a long followed by that many bytes of data."""
    encoder.write_bytes(datum)


def write_utf8(encoder, datum, schema, named_schemas, fname, options):
    """A string is encoded as a long followed by that many bytes of UTF-8
    encoded character data. Values with a ``marshal_text`` method are
    written as the bytes it returns."""
    if not isinstance(datum, str) and hasattr(datum, "marshal_text"):
        encoder.write_bytes(datum.marshal_text())
    else:
        encoder.write_utf8(datum)


def write_fixed(encoder, datum, schema, named_schemas, fname, options):
    """Fixed instances are encoded using the number of bytes declared in the
    schema."""
    if len(datum) != schema["size"]:
        raise ValueError(
            f"data of length {len(datum)} does not match schema size: {schema}"
        )
    encoder.write_fixed(datum)


def write_enum(encoder, datum, schema, named_schemas, fname, options):
    """An enum is encoded by a int, representing the zero-based position of
    the symbol in the schema."""
    try:
        index = schema["symbols"].index(datum)
    except ValueError:
        raise ValueError(f"{datum!r} is not a symbol of enum {schema['name']}")
    encoder.write_enum(index)


def write_array(encoder, datum, schema, named_schemas, fname, options):
    """Arrays are encoded as a series of blocks.

    Each block consists of a long count value, followed by that many array
    items.  A block with count zero indicates the end of the array.  Each item
    is encoded per the array's item schema.

    Only one block is ever written: the count of every item, the items and
    the terminating zero."""
    encoder.write_array_start()
    if len(datum) > 0:
        encoder.write_item_count(len(datum))
        dtype = schema["items"]
        for item in datum:
            write_data(encoder, item, dtype, named_schemas, fname, options)
            encoder.end_item()
    encoder.write_array_end()


def write_map(encoder, datum, schema, named_schemas, fname, options):
    """Maps are encoded as a series of blocks.

    Each block consists of a long count value, followed by that many key/value
    pairs.  A block with count zero indicates the end of the map.  Each item is
    encoded per the map's value schema."""
    encoder.write_map_start()
    if len(datum) > 0:
        encoder.write_item_count(len(datum))
        vtype = schema["values"]
        for key, val in datum.items():
            encoder.write_utf8(key)
            write_data(encoder, val, vtype, named_schemas, fname, options)
    encoder.write_map_end()


def write_union(encoder, datum, schema, named_schemas, fname, options):
    """A union is encoded by first writing a long value indicating the
    zero-based position within the union of the schema of its value. The value
    is then encoded per the indicated schema within the union.

    The first branch the datum is valid for is used. A ``(name, datum)``
    tuple selects the branch with that type name explicitly."""

    best_match_index = -1
    if isinstance(datum, tuple) and not options.get("disable_tuple_notation"):
        (name, datum) = datum
        for index, candidate in enumerate(schema):
            extracted_type = extract_record_type(candidate)
            if extracted_type in NAMED_TYPES:
                schema_name = candidate["name"]
            else:
                schema_name = extracted_type
            if name == schema_name:
                best_match_index = index
                break

        if best_match_index == -1:
            field = f"on field {fname}" if fname else ""
            raise ValueError(
                f"provided union type name {name} not found in schema {schema} {field}"
            )
    else:
        # Python floats are doubles, prefer a later double branch over float
        could_be_float = False
        for index, candidate in enumerate(schema):
            if could_be_float:
                if extract_record_type(candidate) == "double":
                    best_match_index = index
                    break
                continue

            if validate(datum, candidate, named_schemas):
                best_match_index = index
                if extract_record_type(candidate) != "float":
                    break
                could_be_float = True

        if best_match_index == -1:
            field = f"on field {fname}" if fname else ""
            raise ValueError(
                f"{repr(datum)} (type {type(datum)}) do not match {schema} {field}"
            )

    encoder.write_index(best_match_index, schema[best_match_index])
    write_data(
        encoder, datum, schema[best_match_index], named_schemas, fname, options
    )


def write_record(encoder, datum, schema, named_schemas, fname, options):
    """A record is encoded by encoding the values of its fields in the order
    that they are declared. In other words, a record is encoded as just the
    concatenation of the encodings of its fields.  Field values are encoded per
    their schema.

    A value that is not a mapping is handed to the codec selected for its
    type (a custom marshaler or a message)."""
    if not isinstance(datum, Mapping):
        codecs = options.get("codecs")
        codec = None
        if codecs is not None:
            codec = codecs.select_encoder(schema, type(datum), named_schemas)
        if codec is None:
            field = f" on field {fname}" if fname else ""
            raise TypeError(
                f"no codec for {type(datum).__name__} as record {schema['name']}{field}"
            )
        return codec.encode(encoder, datum)

    extras = set(datum) - set(field["name"] for field in schema["fields"])
    if (options.get("strict") or options.get("strict_allow_default")) and extras:
        raise ValueError(
            f'record contains more fields than the schema specifies: {", ".join(extras)}'
        )
    for field in schema["fields"]:
        name = field["name"]
        field_type = field["type"]
        if name not in datum:
            if options.get("strict") or (
                options.get("strict_allow_default") and "default" not in field
            ):
                raise ValueError(
                    f"Field {name} is specified in the schema but missing from the record"
                )
            elif "default" not in field and "null" not in field_type:
                raise ValueError(f"no value and no default for {name}")
        datum_value = datum.get(name, field.get("default"))
        if field_type == "float" or field_type == "double":
            # Handle float values like "NaN"
            datum_value = float(datum_value)
        write_data(encoder, datum_value, field_type, named_schemas, name, options)


PRIMITIVE_WRITERS = {
    "null": write_null,
    "boolean": write_boolean,
    "string": write_utf8,
    "int": write_int,
    "long": write_long,
    "float": write_float,
    "double": write_double,
    "bytes": write_bytes,
    "fixed": write_fixed,
    "enum": write_enum,
}

COMPLEX_WRITERS = {
    "array": write_array,
    "map": write_map,
    "union": write_union,
    "record": write_record,
    "error": write_record,
}


def write_data(encoder, datum, schema, named_schemas, fname, options):
    """Write a datum of data to output stream.

    Parameters
    ----------
    encoder: encoder
        Binary encoder
    datum: object
        Data to write
    schema: dict
        Schema to use
    named_schemas: dict
        Mapping of fullname to schema definition
    fname: str
        Name of the enclosing record field, for error messages
    options: dict
        Writer options; ``codecs`` holds the selector used for values that
        are not dicts
    """

    record_type = extract_record_type(schema)

    fn = PRIMITIVE_WRITERS.get(record_type)
    if fn:
        try:
            return fn(encoder, datum, schema, named_schemas, fname, options)
        except TypeError as ex:
            if fname:
                raise TypeError(f"{ex} on field {fname}")
            raise

    # Errors from nested values may come from a custom marshaler and are
    # passed on unchanged
    fn = COMPLEX_WRITERS.get(record_type)
    if fn:
        return fn(encoder, datum, schema, named_schemas, fname, options)
    elif record_type in named_schemas:
        return write_data(
            encoder, datum, named_schemas[record_type], named_schemas, fname, options
        )
    else:
        raise UnknownType(record_type)
