"""Accessor provider for protocol buffer messages.

Everything goes through the ``google.protobuf`` reflection API (message
descriptors, ``HasField``/``ClearField``/``WhichOneof``), so generated
classes and classes built at runtime from descriptors work alike.
"""

from functools import lru_cache

from google.protobuf import message_factory
from google.protobuf.descriptor import FieldDescriptor
from google.protobuf.message import Message

from .accessor import (
    EnumType,
    FieldInfo,
    FieldKind,
    MessageAccessor,
    MessageType,
    OneofInfo,
)

_KINDS = {
    FieldDescriptor.TYPE_INT32: FieldKind.INT32,
    FieldDescriptor.TYPE_SINT32: FieldKind.INT32,
    FieldDescriptor.TYPE_SFIXED32: FieldKind.INT32,
    FieldDescriptor.TYPE_UINT32: FieldKind.UINT32,
    FieldDescriptor.TYPE_FIXED32: FieldKind.UINT32,
    FieldDescriptor.TYPE_INT64: FieldKind.INT64,
    FieldDescriptor.TYPE_SINT64: FieldKind.INT64,
    FieldDescriptor.TYPE_SFIXED64: FieldKind.INT64,
    FieldDescriptor.TYPE_UINT64: FieldKind.UINT64,
    FieldDescriptor.TYPE_FIXED64: FieldKind.UINT64,
    FieldDescriptor.TYPE_FLOAT: FieldKind.FLOAT,
    FieldDescriptor.TYPE_DOUBLE: FieldKind.DOUBLE,
    FieldDescriptor.TYPE_BOOL: FieldKind.BOOL,
    FieldDescriptor.TYPE_STRING: FieldKind.STRING,
    FieldDescriptor.TYPE_BYTES: FieldKind.BYTES,
    FieldDescriptor.TYPE_ENUM: FieldKind.ENUM,
    FieldDescriptor.TYPE_MESSAGE: FieldKind.MESSAGE,
    FieldDescriptor.TYPE_GROUP: FieldKind.MESSAGE,
}


def is_message_type(typ) -> bool:
    return isinstance(typ, type) and issubclass(typ, Message)


def _is_repeated(field):
    # Recent protobuf releases replace label with is_repeated
    is_repeated = getattr(field, "is_repeated", None)
    if is_repeated is not None:
        return is_repeated
    return field.label == FieldDescriptor.LABEL_REPEATED


def _is_map(field):
    return (
        field.type == FieldDescriptor.TYPE_MESSAGE
        and field.message_type.GetOptions().map_entry
        and _is_repeated(field)
    )


def _is_synthetic(oneof):
    """proto3 ``optional`` fields are wrapped in a oneof of their own named
    after the field with a leading underscore."""
    return len(oneof.fields) == 1 and oneof.name == "_" + oneof.fields[0].name


@lru_cache(maxsize=None)
def _enum_type(descriptor):
    return EnumType(
        descriptor.full_name, {value.name: value.number for value in descriptor.values}
    )


def _field_info(field):
    if _is_map(field):
        entry = field.message_type
        return FieldInfo(
            field.name,
            FieldKind.MESSAGE,
            repeated=True,
            key=_field_info(entry.fields_by_name["key"]),
            value=_field_info(entry.fields_by_name["value"]),
        )

    kind = _KINDS[field.type]
    return FieldInfo(
        field.name,
        kind,
        repeated=_is_repeated(field),
        has_presence=field.has_presence,
        enum_type=_enum_type(field.enum_type) if kind is FieldKind.ENUM else None,
        message_type=(
            message_type_for(field.message_type) if kind is FieldKind.MESSAGE else None
        ),
    )


class ProtobufMessageType(MessageType):
    """Field layout of one protobuf message descriptor.

    Fields are described on first use; nested message types are only
    looked at when the codec reaches them, which keeps recursive messages
    finite.
    """

    def __init__(self, descriptor):
        self.descriptor = descriptor
        self.name = descriptor.name
        self.full_name = descriptor.full_name
        self._fields = None
        self._oneofs = None
        self._message_class = None

    def _describe(self):
        fields = {f.name: _field_info(f) for f in self.descriptor.fields}
        oneofs = {
            o.name: OneofInfo(o.name, [fields[f.name] for f in o.fields])
            for o in self.descriptor.oneofs
            if not _is_synthetic(o)
        }
        self._oneofs = oneofs
        self._fields = fields

    def field(self, name):
        if self._fields is None:
            self._describe()
        return self._fields.get(name)

    def oneof(self, name):
        if self._oneofs is None:
            self._describe()
        return self._oneofs.get(name)

    @property
    def message_class(self):
        if self._message_class is None:
            self._message_class = message_factory.GetMessageClass(self.descriptor)
        return self._message_class

    def new(self):
        return ProtobufAccessor(self.message_class(), self)

    def __repr__(self):
        return f"<ProtobufMessageType {self.full_name}>"


@lru_cache(maxsize=None)
def message_type_for(descriptor) -> ProtobufMessageType:
    return ProtobufMessageType(descriptor)


class ProtobufAccessor(MessageAccessor):
    """Reads and writes fields of a protobuf message by name."""

    __slots__ = ("_message", "_type")

    def __init__(self, message, message_type=None):
        self._message = message
        self._type = message_type or message_type_for(message.DESCRIPTOR)

    @property
    def message_type(self):
        return self._type

    def unwrap(self):
        return self._message

    def _wrap(self, field, value):
        if field.kind is FieldKind.MESSAGE:
            return ProtobufAccessor(value, field.message_type)
        return value

    def has(self, field):
        if field.repeated:
            return len(getattr(self._message, field.name)) > 0
        if field.has_presence:
            return self._message.HasField(field.name)
        # Without explicit presence a field is populated when it is not the
        # zero value of its type
        return bool(getattr(self._message, field.name))

    def get(self, field):
        return self._wrap(field, getattr(self._message, field.name))

    def set(self, field, value):
        if field.kind is FieldKind.MESSAGE:
            nested = getattr(self._message, field.name)
            nested.CopyFrom(value.unwrap())
            nested.SetInParent()
        else:
            setattr(self._message, field.name, value)

    def clear(self, field):
        self._message.ClearField(field.name)

    def which_oneof(self, oneof):
        name = self._message.WhichOneof(oneof.name)
        if name is None:
            return None
        return self._type.field(name)

    def list_len(self, field):
        return len(getattr(self._message, field.name))

    def list_get(self, field, index):
        return self._wrap(field, getattr(self._message, field.name)[index])

    def list_append(self, field, value):
        items = getattr(self._message, field.name)
        if field.kind is FieldKind.MESSAGE:
            items.add().CopyFrom(value.unwrap())
        else:
            items.append(value)

    def map_len(self, field):
        return len(getattr(self._message, field.name))

    def map_items(self, field):
        value_field = field.value
        for key, value in getattr(self._message, field.name).items():
            yield key, self._wrap(value_field, value)

    def map_set(self, field, key, value):
        entries = getattr(self._message, field.name)
        if field.value.kind is FieldKind.MESSAGE:
            entries[key].CopyFrom(value.unwrap())
        else:
            entries[key] = value
