"""Types that encode and decode themselves.

A class takes over its own avro encoding by defining ``encode_avro`` and
``decode_avro``. Neither needs to inherit from anything here: the abstract
base classes below recognise any class with the right methods, the way
``collections.abc.Sized`` recognises anything with ``__len__``.

Example::

    class Account:
        def encode_avro(self, encoder):
            encoder.write_int(self.id)
            encoder.write_utf8(self.username)

        def decode_avro(self, decoder):
            self.id = decoder.read_int()
            self.username = decoder.read_utf8()

The methods receive the primitive binary encoder or decoder and nothing
else. They must produce exactly the bytes the record schema describes,
union indexes and nested records included.
"""

from abc import ABC, abstractmethod


def _check_methods(C, *methods):
    mro = C.__mro__
    for method in methods:
        for B in mro:
            if method in B.__dict__:
                if B.__dict__[method] is None:
                    return NotImplemented
                break
        else:
            return NotImplemented
    return True


class RecordMarshaler(ABC):
    """A type that writes itself as an avro record."""

    __slots__ = ()

    @abstractmethod
    def encode_avro(self, encoder):
        pass

    @classmethod
    def __subclasshook__(cls, C):
        if cls is RecordMarshaler:
            return _check_methods(C, "encode_avro")
        return NotImplemented


class RecordUnmarshaler(ABC):
    """A type that reads itself from an avro record."""

    __slots__ = ()

    @abstractmethod
    def decode_avro(self, decoder):
        pass

    @classmethod
    def __subclasshook__(cls, C):
        if cls is RecordUnmarshaler:
            return _check_methods(C, "decode_avro")
        return NotImplemented


class TextMarshaler(ABC):
    """A type that writes itself as the bytes of an avro string."""

    __slots__ = ()

    @abstractmethod
    def marshal_text(self):
        pass

    @classmethod
    def __subclasshook__(cls, C):
        if cls is TextMarshaler:
            return _check_methods(C, "marshal_text")
        return NotImplemented


class TextUnmarshaler(ABC):
    """A type that reads itself from the bytes of an avro string."""

    __slots__ = ()

    @abstractmethod
    def unmarshal_text(self, data):
        pass

    @classmethod
    def __subclasshook__(cls, C):
        if cls is TextUnmarshaler:
            return _check_methods(C, "unmarshal_text")
        return NotImplemented


def allocate(cls):
    """A new instance of cls created without calling ``__init__``; the
    unmarshaler is expected to populate it completely."""
    return cls.__new__(cls)


class MarshalerCodec:
    """Hands a record over to the value's own ``encode_avro`` /
    ``decode_avro``."""

    def __init__(self, schema):
        self.schema = schema

    def encode(self, encoder, value):
        # A missing optional value; any union index was written by the caller
        if value is None:
            return
        value.encode_avro(encoder)

    def decode(self, decoder, target):
        if isinstance(target, type):
            target = allocate(target)
        target.decode_avro(decoder)
        return target


class TextMarshalerCodec:
    """Writes a string schema with the value's ``marshal_text`` and reads it
    back with ``unmarshal_text``."""

    def __init__(self, schema):
        self.schema = schema

    def encode(self, encoder, value):
        if value is None:
            encoder.write_bytes(b"")
            return
        encoder.write_bytes(value.marshal_text())

    def decode(self, decoder, target):
        if isinstance(target, type):
            target = allocate(target)
        target.unmarshal_text(decoder.read_bytes())
        return target
