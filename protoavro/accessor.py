"""The capability the record codec is written against.

A structured value family (protobuf messages, for instance) takes part in
avro encoding by providing a :class:`MessageType` describing its fields
and a :class:`MessageAccessor` to read and write them. The codec never
looks at the concrete python type behind either.
"""

import enum
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple


class FieldKind(enum.Enum):
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT = "float"
    DOUBLE = "double"
    BOOL = "bool"
    STRING = "string"
    BYTES = "bytes"
    ENUM = "enum"
    MESSAGE = "message"


class EnumType:
    """Names and numbers of an enum, both ways."""

    def __init__(self, name: str, numbers: Dict[str, int]):
        self.name = name
        self._numbers = dict(numbers)
        self._names = {}
        for symbol, number in self._numbers.items():
            # Aliased numbers resolve to the first declared name
            self._names.setdefault(number, symbol)

    def number(self, name: str) -> Optional[int]:
        return self._numbers.get(name)

    def symbol(self, number: int) -> Optional[str]:
        return self._names.get(number)


class FieldInfo:
    """Type level description of one member of a message.

    For list fields ``kind`` is the kind of the elements. Map fields carry
    ``key`` and ``value`` descriptions of the entry members instead.
    """

    __slots__ = (
        "name",
        "kind",
        "repeated",
        "has_presence",
        "enum_type",
        "message_type",
        "key",
        "value",
    )

    def __init__(
        self,
        name: str,
        kind: FieldKind,
        *,
        repeated: bool = False,
        has_presence: bool = False,
        enum_type: Optional[EnumType] = None,
        message_type: Optional["MessageType"] = None,
        key: Optional["FieldInfo"] = None,
        value: Optional["FieldInfo"] = None,
    ):
        self.name = name
        self.kind = kind
        self.repeated = repeated
        self.has_presence = has_presence
        self.enum_type = enum_type
        self.message_type = message_type
        self.key = key
        self.value = value

    @property
    def is_map(self) -> bool:
        return self.value is not None

    @property
    def is_list(self) -> bool:
        return self.repeated and self.value is None

    def __repr__(self):
        return f"<FieldInfo {self.name} {self.kind.value}>"


class OneofInfo:
    """A group of mutually exclusive fields."""

    __slots__ = ("name", "fields")

    def __init__(self, name: str, fields: List[FieldInfo]):
        self.name = name
        self.fields = fields

    def __repr__(self):
        return f"<OneofInfo {self.name} {[f.name for f in self.fields]}>"


class MessageType(ABC):
    """Type level view of a structured message."""

    name: str
    full_name: str

    @abstractmethod
    def field(self, name: str) -> Optional[FieldInfo]:
        """The field called name, None when the message has none."""

    @abstractmethod
    def oneof(self, name: str) -> Optional[OneofInfo]:
        """The oneof group called name, None when the message has none."""

    @abstractmethod
    def new(self) -> "MessageAccessor":
        """An accessor over a freshly allocated, empty message."""


class MessageAccessor(ABC):
    """Reads and writes the members of one message value.

    Message-kind values are exchanged as accessors: ``get`` of a message
    field returns one, and ``set`` accepts one.
    """

    @property
    @abstractmethod
    def message_type(self) -> MessageType:
        pass

    @abstractmethod
    def unwrap(self) -> Any:
        """The underlying message value."""

    @abstractmethod
    def has(self, field: FieldInfo) -> bool:
        """Whether the field is populated. For fields without explicit
        presence this means it holds a non-default value."""

    @abstractmethod
    def get(self, field: FieldInfo) -> Any:
        pass

    @abstractmethod
    def set(self, field: FieldInfo, value: Any) -> None:
        """Stores value, replacing what the field held. Setting a oneof member
        selects it."""

    @abstractmethod
    def clear(self, field: FieldInfo) -> None:
        pass

    @abstractmethod
    def which_oneof(self, oneof: OneofInfo) -> Optional[FieldInfo]:
        """The selected member of the group, None when none is set."""

    @abstractmethod
    def list_len(self, field: FieldInfo) -> int:
        pass

    @abstractmethod
    def list_get(self, field: FieldInfo, index: int) -> Any:
        pass

    @abstractmethod
    def list_append(self, field: FieldInfo, value: Any) -> None:
        pass

    @abstractmethod
    def map_len(self, field: FieldInfo) -> int:
        pass

    @abstractmethod
    def map_items(self, field: FieldInfo) -> Iterable[Tuple[Any, Any]]:
        pass

    @abstractmethod
    def map_set(self, field: FieldInfo, key: Any, value: Any) -> None:
        pass
