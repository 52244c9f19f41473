from io import BytesIO
from typing import IO, Any, Optional

from ._read import read_data
from .codec import Codecs
from .io.binary_decoder import BinaryDecoder
from .schema import extract_record_type
from .types import Schema


def schemaless_reader(
    fo: IO,
    schema: Schema,
    target: Any = None,
    *,
    codecs: Optional[Codecs] = None,
) -> Any:
    """Reads a single record written using the
    :meth:`~protoavro.write.schemaless_writer`

    Parameters
    ----------
    fo
        Input stream
    schema
        Schema used when calling schemaless_writer
    target
        What to decode into. None (the default) or ``dict`` returns plain
        dicts and lists. A class returns a new instance of it, an instance is
        populated in place and returned
    codecs
        Selector to bind codecs with, a new one per call by default

    Example::

        parsed_schema = protoavro.parse_schema(schema)
        with open('file', 'rb') as fp:
            account = protoavro.schemaless_reader(fp, parsed_schema, Account)

    Note: The ``schemaless_reader`` can only read a single record.
    """
    if codecs is None:
        codecs = Codecs()
    schema, named_schemas = codecs.parse(schema)

    decoder = BinaryDecoder(fo)
    if target is None or target is dict:
        return read_data(decoder, schema, named_schemas)

    typ = target if isinstance(target, type) else type(target)
    codec = codecs.select_decoder(schema, typ, named_schemas)
    if codec is None:
        raise TypeError(
            f"cannot decode {extract_record_type(schema)} into {typ.__name__}"
        )
    return codec.decode(decoder, target)


def unmarshal(
    schema: Schema, data: bytes, target: Any = None, *, codecs: Optional[Codecs] = None
) -> Any:
    """Decodes the avro binary data into target, see
    :meth:`~protoavro.read.schemaless_reader`.

    Example::

        account = protoavro.unmarshal(schema, data, Account)
    """
    return schemaless_reader(BytesIO(data), schema, target, codecs=codecs)


__all__ = [
    "schemaless_reader",
    "unmarshal",
]
