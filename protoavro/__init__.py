"""Avro binary encoding for protobuf messages.

Example usage::

    import protoavro

    schema = protoavro.parse_schema({
        'name': 'Account',
        'namespace': 'test',
        'type': 'record',
        'fields': [
            {'name': 'id', 'type': 'int'},
            {'name': 'username', 'type': ['null', 'string'], 'default': None},
        ],
    })

    # One selector for the lifetime of the schema keeps bound codecs cached
    codecs = protoavro.Codecs()

    # account is an instance of a protobuf message class with an int32 id and
    # an optional string username
    data = protoavro.marshal(schema, account, codecs=codecs)
    decoded = protoavro.unmarshal(schema, data, Account, codecs=codecs)

    # Without a target, data decodes to plain dicts
    protoavro.unmarshal(schema, data)

Classes that define ``encode_avro(encoder)`` and ``decode_avro(decoder)``
take over their own encoding, see :mod:`protoavro.marshaler`.
"""

__version_info__ = (0, 3, 0)
__version__ = "%s.%s.%s" % __version_info__


import protoavro.read
import protoavro.write
import protoavro.schema
import protoavro.codec
import protoavro.marshaler
import protoavro.errors

schemaless_reader = protoavro.read.schemaless_reader
unmarshal = protoavro.read.unmarshal
schemaless_writer = protoavro.write.schemaless_writer
marshal = protoavro.write.marshal
parse_schema = protoavro.schema.parse_schema
Codecs = protoavro.codec.Codecs
CodecCache = protoavro.codec.CodecCache
RecordMarshaler = protoavro.marshaler.RecordMarshaler
RecordUnmarshaler = protoavro.marshaler.RecordUnmarshaler
TextMarshaler = protoavro.marshaler.TextMarshaler
TextUnmarshaler = protoavro.marshaler.TextUnmarshaler
CodecError = protoavro.errors.CodecError
SchemaMismatchError = protoavro.errors.SchemaMismatchError
InvalidUnionIndex = protoavro.errors.InvalidUnionIndex
MissingFieldError = protoavro.errors.MissingFieldError

__all__ = [n for n in locals().keys() if not n.startswith("_")] + ["__version__"]
