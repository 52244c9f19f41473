"""Choosing how a runtime type is encoded with a schema.

For a schema and a python type, :class:`Codecs` picks the first of:

1. the type's own marshaling methods (``encode_avro``/``decode_avro`` for
   records, ``marshal_text``/``unmarshal_text`` for strings),
2. a message codec, when the schema is a record and a message provider
   (protobuf) recognises the type,
3. nothing, in which case the caller falls back to the generic dict
   mapping.

Binding a message codec walks the message descriptors, so bound codecs are
kept in a :class:`CodecCache` and reused for every later value of the same
schema and type.
"""

import logging

from ._message import RecordCodec
from .errors import CodecError
from .marshaler import (
    MarshalerCodec,
    RecordMarshaler,
    RecordUnmarshaler,
    TextMarshaler,
    TextMarshalerCodec,
    TextUnmarshaler,
)
from .protobuf import ProtobufAccessor, is_message_type, message_type_for
from .schema import extract_record_type, parse_schema, resolve

logger = logging.getLogger(__name__)

ENCODE = "encode"
DECODE = "decode"


class ProtobufProvider:
    """Puts protobuf message classes behind the message accessor."""

    name = "protobuf"

    def handles(self, typ):
        return is_message_type(typ)

    def message_type(self, typ):
        return message_type_for(typ.DESCRIPTOR)

    def accessor(self, message, message_type):
        return ProtobufAccessor(message, message_type)

    def allocate(self, typ):
        return typ()


class MessageCodec:
    """Encodes message values of one type through a :class:`RecordCodec`."""

    def __init__(self, schema, typ, provider, named_schemas):
        self.schema = schema
        self.type = typ
        self.provider = provider
        self.record_codec = RecordCodec(
            schema, provider.message_type(typ), named_schemas
        )

    def encode(self, encoder, value):
        if value is None:
            raise CodecError(f"cannot encode None as {self.type.__name__} message")
        message_type = self.record_codec.message_type
        self.record_codec.encode(encoder, self.provider.accessor(value, message_type))

    def decode(self, decoder, target):
        if isinstance(target, type):
            target = self.provider.allocate(target)
        message_type = self.record_codec.message_type
        self.record_codec.decode(decoder, self.provider.accessor(target, message_type))
        return target


class CodecCache:
    """Bound codecs keyed by schema identity, python type and direction.

    Lookups take no lock. When two threads bind the same key at once both
    do the work and the first one stored is the one everybody keeps.
    """

    def __init__(self):
        self._codecs = {}

    def get_or_bind(self, schema, typ, direction, bind):
        key = (id(schema), typ, direction)
        entry = self._codecs.get(key)
        if entry is None:
            # The schema is kept alongside the codec so its id stays unique
            # for as long as the entry lives
            entry = self._codecs.setdefault(key, (schema, bind()))
        return entry[1]

    def clear(self):
        self._codecs.clear()

    def __len__(self):
        return len(self._codecs)


class Codecs:
    """Selects and caches the codec for a schema and a python type.

    Keep one instance for as long as the schemas it is used with; it owns
    the cache of everything it has bound.

    Parameters
    ----------
    cache
        Cache to store bound codecs in, a new one by default
    providers
        Message families recognised for record schemas
    """

    def __init__(self, cache=None, providers=None):
        self.cache = cache if cache is not None else CodecCache()
        self.providers = (
            tuple(providers) if providers is not None else (ProtobufProvider(),)
        )
        self._parsed = {}

    def parse(self, schema):
        """The parsed schema and its named types.

        Each schema object is parsed once; later calls with the same object
        return the same parsed schema, so codecs bound for it are found in
        the cache again. A schema must not be modified after it was first
        used here.
        """
        key = id(schema)
        entry = self._parsed.get(key)
        if entry is None:
            named_schemas = {}
            parsed = parse_schema(schema, named_schemas)
            # The caller's schema is kept so its id is not reused
            entry = self._parsed.setdefault(key, (schema, parsed, named_schemas))
        return entry[1], entry[2]

    def select_encoder(self, schema, typ, named_schemas=None):
        """Codec to encode values of typ with schema, None when the generic
        mapping applies."""
        return self._select(schema, typ, ENCODE, named_schemas)

    def select_decoder(self, schema, typ, named_schemas=None):
        """Codec to decode schema into values of typ, None when the generic
        mapping applies."""
        return self._select(schema, typ, DECODE, named_schemas)

    def _select(self, schema, typ, direction, named_schemas):
        if named_schemas is None:
            named_schemas = {}
            if isinstance(schema, dict):
                named_schemas = schema.get("__named_schemas", named_schemas)
        schema = resolve(schema, named_schemas)

        return self.cache.get_or_bind(
            schema,
            typ,
            direction,
            lambda: self._bind(schema, typ, direction, named_schemas),
        )

    def _bind(self, schema, typ, direction, named_schemas):
        record_type = extract_record_type(schema)

        if record_type == "string":
            marshaler = TextMarshaler if direction == ENCODE else TextUnmarshaler
            if issubclass(typ, marshaler):
                logger.debug("bound text marshaler for %s", typ.__name__)
                return TextMarshalerCodec(schema)
            return None

        if record_type != "record" and record_type != "error":
            return None

        marshaler = RecordMarshaler if direction == ENCODE else RecordUnmarshaler
        if issubclass(typ, marshaler):
            logger.debug(
                "bound record marshaler for %s as %s", typ.__name__, schema["name"]
            )
            return MarshalerCodec(schema)

        for provider in self.providers:
            if provider.handles(typ):
                logger.debug(
                    "bound %s message codec for %s as %s",
                    provider.name,
                    typ.__name__,
                    schema["name"],
                )
                return MessageCodec(schema, typ, provider, named_schemas)

        return None
