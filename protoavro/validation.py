import numbers
from collections.abc import Mapping, Sequence

from .const import INT_MAX_VALUE, INT_MIN_VALUE, LONG_MAX_VALUE, LONG_MIN_VALUE
from .schema import extract_record_type, UnknownType

NoValue = object()


def _validate_null(datum, **kwargs):
    """Checks that the data value is None."""
    return datum is None


def _validate_boolean(datum, **kwargs):
    """Check that the data value is bool instance"""
    return isinstance(datum, bool)


def _validate_string(datum, **kwargs):
    """Check that the data value is string, or a value that marshals itself
    to text"""
    return isinstance(datum, str) or (
        hasattr(datum, "marshal_text") and not isinstance(datum, type)
    )


def _validate_bytes(datum, **kwargs):
    """Check that the data value is python bytes type"""
    return isinstance(datum, (bytes, bytearray))


def _validate_int(datum, **kwargs):
    """
    Check that the data value is a non floating
    point number with size less that Int32.

    Int32 = -2147483648<=datum<=2147483647
    """
    return (
        isinstance(datum, (int, numbers.Integral))
        and INT_MIN_VALUE <= datum <= INT_MAX_VALUE
        and not isinstance(datum, bool)
    )


def _validate_long(datum, **kwargs):
    """
    Check that the data value is a non floating
    point number with size less that long64.

    Int64 = -9223372036854775808 <= datum <= 9223372036854775807
    """
    return (
        isinstance(datum, (int, numbers.Integral))
        and LONG_MIN_VALUE <= datum <= LONG_MAX_VALUE
        and not isinstance(datum, bool)
    )


def _validate_float(datum, **kwargs):
    """
    Check that the data value is a floating
    point number or double precision.
    """
    return isinstance(datum, (int, float, numbers.Real)) and not isinstance(datum, bool)


def _validate_fixed(datum, schema, **kwargs):
    """
    Check that the data value is fixed width bytes,
    matching the schema['size'] exactly!
    """
    return isinstance(datum, bytes) and len(datum) == schema["size"]


def _validate_enum(datum, schema, **kwargs):
    """Check that the data value matches one of the enum symbols."""
    return datum in schema["symbols"]


def _validate_array(datum, schema, named_schemas):
    """Check that the data list values all match schema['items']."""
    return (
        isinstance(datum, Sequence)
        and not isinstance(datum, (str, bytes))
        and all(validate(d, schema["items"], named_schemas) for d in datum)
    )


def _validate_map(datum, schema, named_schemas):
    """
    Check that the data is a Map(k,v)
    matching values to schema['values'] type.
    """
    return (
        isinstance(datum, Mapping)
        and all(isinstance(k, str) for k in datum)
        and all(validate(v, schema["values"], named_schemas) for v in datum.values())
    )


def _validate_record(datum, schema, named_schemas):
    """
    Check that the data is a Mapping type with all schema defined fields
    validated as True.

    Values that are not mappings (custom marshalers, messages) are encoded
    by their own codec and are accepted for any record.
    """
    if not isinstance(datum, Mapping):
        return datum is not None and not isinstance(
            datum, (str, bytes, bytearray, numbers.Number, Sequence)
        )
    return all(
        validate(datum.get(f["name"], f.get("default", NoValue)), f["type"], named_schemas)
        for f in schema["fields"]
    )


def _validate_union(datum, schema, named_schemas):
    """
    Check that the data matches at least one of the union branches.
    """
    return any(validate(datum, s, named_schemas) for s in schema)


VALIDATORS = {
    "null": _validate_null,
    "boolean": _validate_boolean,
    "string": _validate_string,
    "int": _validate_int,
    "long": _validate_long,
    "float": _validate_float,
    "double": _validate_float,
    "bytes": _validate_bytes,
    "fixed": _validate_fixed,
    "enum": _validate_enum,
    "array": _validate_array,
    "map": _validate_map,
    "union": _validate_union,
    "record": _validate_record,
    "error": _validate_record,
}


def validate(datum, schema, named_schemas):
    """Returns True when datum can be written with schema by the generic
    writer. The schema is expected to already be parsed."""
    if datum is NoValue:
        datum = None

    record_type = extract_record_type(schema)

    validator = VALIDATORS.get(record_type)
    if validator:
        return validator(datum, schema=schema, named_schemas=named_schemas)
    elif record_type in named_schemas:
        return validate(datum, named_schemas[record_type], named_schemas)
    else:
        raise UnknownType(record_type)
