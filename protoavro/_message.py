"""Encoding and decoding of avro records through a message accessor.

The record schema drives everything: its fields are visited in declared
order and each one is matched by name to a member (or a oneof group) of
the message type. Fields the message does not have are skipped when
decoding, so a message type may lag behind the schema it is read with.
"""

import logging
from collections import namedtuple

from ._read import skip_data
from .accessor import FieldKind
from .const import INT_MIN_VALUE, LONG_MIN_VALUE, UINT32_MASK, UINT64_MASK
from .errors import (
    CodecError,
    InvalidUnionIndex,
    MissingFieldError,
    SchemaMismatchError,
)
from .schema import (
    extract_record_type,
    is_nullable_union,
    null_index,
    resolve,
    short_name,
)

logger = logging.getLogger(__name__)

FieldPlan = namedtuple("FieldPlan", ["field", "oneof", "info"])


def _to_int32(value):
    # two's complement truncation of uint32 values
    return ((value - INT_MIN_VALUE) & UINT32_MASK) + INT_MIN_VALUE


def _to_int64(value):
    return ((value - LONG_MIN_VALUE) & UINT64_MASK) + LONG_MIN_VALUE


def _map_key_text(key):
    if isinstance(key, bool):
        return "true" if key else "false"
    return str(key)


def _map_key(info, text):
    kind = info.kind
    if kind is FieldKind.STRING:
        return text
    if kind is FieldKind.BOOL:
        if text not in ("true", "false"):
            raise CodecError(f"invalid boolean map key {text!r}", info.name)
        return text == "true"
    try:
        return int(text)
    except ValueError:
        raise CodecError(f"invalid {kind.value} map key {text!r}", info.name)


class RecordPlan:
    """The fields of one record schema paired with what the message type
    has for them. Built once per (record, message type) and reused."""

    def __init__(self, schema, message_type):
        self.schema = schema
        self.message_type = message_type
        self.fields = []
        for field in schema["fields"]:
            name = field["name"]
            oneof = message_type.oneof(name)
            info = None if oneof is not None else message_type.field(name)
            self.fields.append(FieldPlan(field, oneof, info))


# Conversion from accessor values to avro primitives. Each writer checks the
# native kind of the field against the avro type it is asked to produce.


def _write_int(encoder, info, value):
    kind = info.kind
    if kind is FieldKind.INT32 or kind is FieldKind.ENUM:
        encoder.write_int(value)
    elif kind is FieldKind.UINT32:
        encoder.write_int(_to_int32(value))
    else:
        raise SchemaMismatchError.conversion("encode", info.name, kind.value, "int")


def _write_long(encoder, info, value):
    kind = info.kind
    if kind is FieldKind.INT64:
        encoder.write_long(value)
    elif kind is FieldKind.UINT64:
        encoder.write_long(_to_int64(value))
    else:
        raise SchemaMismatchError.conversion("encode", info.name, kind.value, "long")


def _write_float(encoder, info, value):
    if info.kind is not FieldKind.FLOAT:
        raise SchemaMismatchError.conversion(
            "encode", info.name, info.kind.value, "float"
        )
    encoder.write_float(value)


def _write_double(encoder, info, value):
    if info.kind is not FieldKind.DOUBLE:
        raise SchemaMismatchError.conversion(
            "encode", info.name, info.kind.value, "double"
        )
    encoder.write_double(value)


def _write_boolean(encoder, info, value):
    if info.kind is not FieldKind.BOOL:
        raise SchemaMismatchError.conversion(
            "encode", info.name, info.kind.value, "boolean"
        )
    encoder.write_boolean(value)


def _write_string(encoder, info, value):
    kind = info.kind
    if kind is FieldKind.STRING:
        encoder.write_utf8(value)
    elif kind is FieldKind.ENUM:
        symbol = info.enum_type.symbol(value)
        if symbol is None:
            raise CodecError(
                f"invalid {info.enum_type.name} number {value} for field {info.name}",
                info.name,
            )
        encoder.write_utf8(symbol)
    else:
        raise SchemaMismatchError.conversion("encode", info.name, kind.value, "string")


def _write_bytes(encoder, info, value):
    if info.kind is not FieldKind.BYTES:
        raise SchemaMismatchError.conversion(
            "encode", info.name, info.kind.value, "bytes"
        )
    encoder.write_bytes(value)


VALUE_WRITERS = {
    "int": _write_int,
    "long": _write_long,
    "float": _write_float,
    "double": _write_double,
    "boolean": _write_boolean,
    "string": _write_string,
    "bytes": _write_bytes,
}


def _read_int(decoder, info):
    kind = info.kind
    if kind is FieldKind.INT32 or kind is FieldKind.ENUM:
        return decoder.read_int()
    elif kind is FieldKind.UINT32:
        return decoder.read_int() & UINT32_MASK
    raise SchemaMismatchError.conversion("decode", info.name, kind.value, "int")


def _read_long(decoder, info):
    kind = info.kind
    if kind is FieldKind.INT64:
        return decoder.read_long()
    elif kind is FieldKind.UINT64:
        return decoder.read_long() & UINT64_MASK
    raise SchemaMismatchError.conversion("decode", info.name, kind.value, "long")


def _read_float(decoder, info):
    if info.kind is not FieldKind.FLOAT:
        raise SchemaMismatchError.conversion(
            "decode", info.name, info.kind.value, "float"
        )
    return decoder.read_float()


def _read_double(decoder, info):
    if info.kind is not FieldKind.DOUBLE:
        raise SchemaMismatchError.conversion(
            "decode", info.name, info.kind.value, "double"
        )
    return decoder.read_double()


def _read_boolean(decoder, info):
    if info.kind is not FieldKind.BOOL:
        raise SchemaMismatchError.conversion(
            "decode", info.name, info.kind.value, "boolean"
        )
    return decoder.read_boolean()


def _read_string(decoder, info):
    kind = info.kind
    if kind is FieldKind.STRING:
        return decoder.read_utf8()
    elif kind is FieldKind.ENUM:
        symbol = decoder.read_utf8()
        number = info.enum_type.number(symbol)
        if number is None:
            raise CodecError(
                f"unknown {info.enum_type.name} value {symbol} for field {info.name}",
                info.name,
            )
        return number
    raise SchemaMismatchError.conversion("decode", info.name, kind.value, "string")


def _read_bytes(decoder, info):
    if info.kind is not FieldKind.BYTES:
        raise SchemaMismatchError.conversion(
            "decode", info.name, info.kind.value, "bytes"
        )
    return decoder.read_bytes()


VALUE_READERS = {
    "int": _read_int,
    "long": _read_long,
    "float": _read_float,
    "double": _read_double,
    "boolean": _read_boolean,
    "string": _read_string,
    "bytes": _read_bytes,
}

# Native kinds each avro type accepts, used to match union branches
COMPATIBLE_KINDS = {
    "int": {FieldKind.INT32, FieldKind.UINT32, FieldKind.ENUM},
    "long": {FieldKind.INT64, FieldKind.UINT64},
    "float": {FieldKind.FLOAT},
    "double": {FieldKind.DOUBLE},
    "boolean": {FieldKind.BOOL},
    "string": {FieldKind.STRING, FieldKind.ENUM},
    "bytes": {FieldKind.BYTES},
}


class RecordCodec:
    """Codec between a record schema and the messages of one message type.

    Parameters
    ----------
    schema: dict
        Parsed record schema
    message_type: MessageType
        Type level view of the messages this codec handles
    named_schemas: dict
        Mapping of fullname to schema definition
    """

    def __init__(self, schema, message_type, named_schemas):
        self.schema = schema
        self.message_type = message_type
        self.named_schemas = named_schemas
        self._plans = {}
        self.plan = self._plan(schema, message_type)

    def _plan(self, schema, message_type):
        key = (schema["name"], message_type.full_name)
        plan = self._plans.get(key)
        if plan is None:
            plan = self._plans.setdefault(key, RecordPlan(schema, message_type))
        return plan

    def _resolve(self, schema):
        return resolve(schema, self.named_schemas)

    def _branch(self, union, index, name):
        if not 0 <= index < len(union):
            raise InvalidUnionIndex(index, name, len(union))
        return self._resolve(union[index])

    def _record_matches(self, message_type, record):
        if message_type.name == short_name(record["name"]):
            return True
        return all(
            message_type.field(f["name"]) is not None
            or message_type.oneof(f["name"]) is not None
            for f in record["fields"]
        )

    def _kind_matches(self, info, schema):
        record_type = extract_record_type(schema)
        if record_type == "record" or record_type == "error":
            return info.kind is FieldKind.MESSAGE and self._record_matches(
                info.message_type, schema
            )
        return info.kind in COMPATIBLE_KINDS.get(record_type, ())

    def matches(self, info, schema):
        """Whether a value of field info can be written with schema."""
        schema = self._resolve(schema)
        record_type = extract_record_type(schema)
        if record_type == "array":
            return info.is_list and self._kind_matches(
                info, self._resolve(schema["items"])
            )
        if record_type == "map":
            return info.is_map and self._kind_matches(
                info.value, self._resolve(schema["values"])
            )
        if info.repeated:
            return False
        return self._kind_matches(info, schema)

    # Encoding

    def encode(self, encoder, message):
        self.encode_record(encoder, self.plan, message)

    def encode_record(self, encoder, plan, message):
        for field, oneof, info in plan.fields:
            if oneof is not None:
                self._encode_oneof(encoder, message, oneof, field["type"])
            elif info is None:
                self._encode_missing(encoder, plan, field)
            else:
                self._encode_field(encoder, message, info, field["type"])

    def _encode_missing(self, encoder, plan, field):
        name = field["name"]
        if "default" not in field:
            raise MissingFieldError(
                f"required field {name} not found in {plan.message_type.full_name}",
                name,
            )
        schema = self._resolve(field["type"])
        if field["default"] is None and isinstance(schema, list):
            index = null_index(schema)
            if index >= 0:
                encoder.write_index(index, schema[index])
                return
        raise MissingFieldError(
            f"field {name} not found in {plan.message_type.full_name} "
            + "and its default is not representable",
            name,
        )

    def _encode_field(self, encoder, message, info, schema):
        schema = self._resolve(schema)
        if isinstance(schema, list):
            return self._encode_union_field(encoder, message, info, schema)
        if info.is_map:
            return self._encode_map(encoder, message, info, schema)
        if info.is_list:
            return self._encode_list(encoder, message, info, schema)
        self._encode_value(encoder, info, message.get(info), schema)

    def _encode_union_field(self, encoder, message, info, union):
        index = null_index(union)
        if index >= 0 and not message.has(info):
            encoder.write_index(index, union[index])
            return

        if is_nullable_union(union):
            index = 1 - index
        else:
            index = next(
                (
                    i
                    for i, branch in enumerate(union)
                    if extract_record_type(branch) != "null"
                    and self.matches(info, branch)
                ),
                -1,
            )
            if index == -1:
                raise SchemaMismatchError(
                    f"no union branch in {union} matches field {info.name} "
                    + f"of kind {info.kind.value}",
                    info.name,
                )
        encoder.write_index(index, union[index])
        self._encode_field(encoder, message, info, union[index])

    def _encode_oneof(self, encoder, message, oneof, schema):
        union = self._resolve(schema)
        if not isinstance(union, list):
            raise SchemaMismatchError(
                f"expected union schema for oneof {oneof.name}, "
                + f"got {extract_record_type(union)}",
                oneof.name,
            )

        member = message.which_oneof(oneof)
        if member is None:
            index = null_index(union)
            if index < 0:
                raise SchemaMismatchError(
                    f"oneof {oneof.name} is not set but union schema has no null type",
                    oneof.name,
                )
            encoder.write_index(index, union[index])
            return

        for index, branch in enumerate(union):
            if extract_record_type(branch) == "null":
                continue
            if self.matches(member, branch):
                encoder.write_index(index, branch)
                self._encode_value(encoder, member, message.get(member), branch)
                return
        raise SchemaMismatchError(
            f"no matching union type found for oneof field {member.name}", member.name
        )

    def _encode_list(self, encoder, message, info, schema):
        if extract_record_type(schema) != "array":
            raise SchemaMismatchError(
                f"expected array schema for repeated field {info.name}, "
                + f"got {extract_record_type(schema)}",
                info.name,
            )
        items = schema["items"]
        length = message.list_len(info)

        encoder.write_array_start()
        if length > 0:
            encoder.write_item_count(length)
            for index in range(length):
                self._encode_value(encoder, info, message.list_get(info, index), items)
                encoder.end_item()
        encoder.write_array_end()

    def _encode_map(self, encoder, message, info, schema):
        if extract_record_type(schema) != "map":
            raise SchemaMismatchError(
                f"expected map schema for map field {info.name}, "
                + f"got {extract_record_type(schema)}",
                info.name,
            )
        values = schema["values"]
        length = message.map_len(info)

        encoder.write_map_start()
        if length > 0:
            encoder.write_item_count(length)
            for key, value in message.map_items(info):
                encoder.write_utf8(_map_key_text(key))
                self._encode_value(encoder, info.value, value, values)
        encoder.write_map_end()

    def _encode_value(self, encoder, info, value, schema):
        schema = self._resolve(schema)
        record_type = extract_record_type(schema)

        if record_type == "union":
            # A single value always exists here, take the first branch that
            # can hold it
            for index, branch in enumerate(schema):
                if extract_record_type(branch) != "null" and self._kind_matches(
                    info, self._resolve(branch)
                ):
                    encoder.write_index(index, branch)
                    return self._encode_value(encoder, info, value, branch)
            raise SchemaMismatchError(
                f"no union branch in {schema} matches field {info.name} "
                + f"of kind {info.kind.value}",
                info.name,
            )

        if record_type == "record" or record_type == "error":
            if info.kind is not FieldKind.MESSAGE:
                raise SchemaMismatchError.conversion(
                    "encode", info.name, info.kind.value, "record"
                )
            plan = self._plan(schema, info.message_type)
            return self.encode_record(encoder, plan, value)

        writer = VALUE_WRITERS.get(record_type)
        if writer is None:
            raise SchemaMismatchError(
                f"unsupported avro type {record_type} for field {info.name}",
                info.name,
            )
        writer(encoder, info, value)

    # Decoding

    def decode(self, decoder, message):
        self.decode_record(decoder, self.plan, message)

    def decode_record(self, decoder, plan, message):
        for field, oneof, info in plan.fields:
            if oneof is not None:
                self._decode_oneof(decoder, message, oneof, field["type"])
            elif info is None:
                logger.debug(
                    "skipping field %s absent from %s",
                    field["name"],
                    plan.message_type.full_name,
                )
                skip_data(decoder, field["type"], self.named_schemas)
            else:
                self._decode_field(decoder, message, info, field["type"])

    def _decode_field(self, decoder, message, info, schema):
        schema = self._resolve(schema)
        if isinstance(schema, list):
            branch = self._branch(schema, decoder.read_index(), info.name)
            if extract_record_type(branch) == "null":
                message.clear(info)
                return
            return self._decode_field(decoder, message, info, branch)
        if info.is_map:
            return self._decode_map(decoder, message, info, schema)
        if info.is_list:
            return self._decode_list(decoder, message, info, schema)
        message.set(info, self._decode_value(decoder, info, schema))

    def _decode_oneof(self, decoder, message, oneof, schema):
        union = self._resolve(schema)
        if not isinstance(union, list):
            raise SchemaMismatchError(
                f"expected union schema for oneof {oneof.name}, "
                + f"got {extract_record_type(union)}",
                oneof.name,
            )

        branch = self._branch(union, decoder.read_index(), oneof.name)
        if extract_record_type(branch) == "null":
            member = message.which_oneof(oneof)
            if member is not None:
                message.clear(member)
            return

        for member in oneof.fields:
            if self.matches(member, branch):
                message.set(member, self._decode_value(decoder, member, branch))
                return
        raise SchemaMismatchError(
            f"no matching field found in oneof {oneof.name} "
            + f"for union type {extract_record_type(branch)}",
            oneof.name,
        )

    def _decode_list(self, decoder, message, info, schema):
        if extract_record_type(schema) != "array":
            raise SchemaMismatchError(
                f"expected array schema for repeated field {info.name}, "
                + f"got {extract_record_type(schema)}",
                info.name,
            )
        items = schema["items"]
        message.clear(info)
        for _ in decoder.iter_array():
            message.list_append(info, self._decode_value(decoder, info, items))

    def _decode_map(self, decoder, message, info, schema):
        if extract_record_type(schema) != "map":
            raise SchemaMismatchError(
                f"expected map schema for map field {info.name}, "
                + f"got {extract_record_type(schema)}",
                info.name,
            )
        values = schema["values"]
        message.clear(info)
        for _ in decoder.iter_map():
            key = _map_key(info.key, decoder.read_utf8())
            message.map_set(info, key, self._decode_value(decoder, info.value, values))

    def _decode_value(self, decoder, info, schema):
        schema = self._resolve(schema)
        record_type = extract_record_type(schema)

        if record_type == "union":
            branch = self._branch(schema, decoder.read_index(), info.name)
            if extract_record_type(branch) == "null":
                raise SchemaMismatchError(
                    f"cannot decode null to field {info.name} of kind {info.kind.value}",
                    info.name,
                )
            return self._decode_value(decoder, info, branch)

        if record_type == "record" or record_type == "error":
            if info.kind is not FieldKind.MESSAGE:
                raise SchemaMismatchError.conversion(
                    "decode", info.name, info.kind.value, "record"
                )
            nested = info.message_type.new()
            self.decode_record(decoder, self._plan(schema, info.message_type), nested)
            return nested

        reader = VALUE_READERS.get(record_type)
        if reader is None:
            raise SchemaMismatchError(
                f"unsupported avro type {record_type} for field {info.name}",
                info.name,
            )
        return reader(decoder, info)
