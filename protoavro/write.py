from io import BytesIO
from typing import IO, Any, Optional

from ._write import write_data
from .codec import Codecs
from .io.binary_encoder import BinaryEncoder
from .types import Schema


def schemaless_writer(
    fo: IO,
    schema: Schema,
    record: Any,
    *,
    codecs: Optional[Codecs] = None,
    strict: bool = False,
    strict_allow_default: bool = False,
    disable_tuple_notation: bool = False,
):
    """Write a single record without the schema or header information

    Parameters
    ----------
    fo
        Output file
    schema
        Schema
    record
        Record to write: a protobuf message, an object with an
        ``encode_avro`` method, or plain dicts and lists
    codecs
        Selector to bind codecs with. Pass the same instance on every call
        to reuse what it has bound; by default a new one is used per call
    strict
        If set to True, an error will be raised if records do not contain
        exactly the same fields that the schema states
    strict_allow_default
        If set to True, an error will be raised if records do not contain
        exactly the same fields that the schema states unless it is a missing
        field that has a default value in the schema
    disable_tuple_notation
        If set to True, tuples will not be treated as a special case. Therefore,
        using a tuple to indicate the type of a record will not work


    Example::

        parsed_schema = protoavro.parse_schema(schema)
        codecs = protoavro.Codecs()
        with open('file', 'wb') as fp:
            protoavro.schemaless_writer(fp, parsed_schema, message, codecs=codecs)

    Note: Bound codecs are cached per schema object, so pass the same
    schema (raw or parsed) and the same ``codecs`` on every call.
    """
    if codecs is None:
        codecs = Codecs()
    schema, named_schemas = codecs.parse(schema)

    encoder = BinaryEncoder(fo)
    codec = codecs.select_encoder(schema, type(record), named_schemas)
    if codec is not None:
        codec.encode(encoder, record)
    else:
        write_data(
            encoder,
            record,
            schema,
            named_schemas,
            "",
            {
                "strict": strict,
                "strict_allow_default": strict_allow_default,
                "disable_tuple_notation": disable_tuple_notation,
                "codecs": codecs,
            },
        )
    encoder.flush()


def marshal(schema: Schema, value: Any, *, codecs: Optional[Codecs] = None) -> bytes:
    """The avro binary encoding of value as bytes.

    Example::

        data = protoavro.marshal(schema, account)
    """
    fo = BytesIO()
    schemaless_writer(fo, schema, value, codecs=codecs)
    return fo.getvalue()


__all__ = [
    "schemaless_writer",
    "marshal",
]
