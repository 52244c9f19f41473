class CodecError(ValueError):
    """Base class for errors raised while encoding or decoding a value."""

    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field


class SchemaMismatchError(CodecError):
    """The schema and the runtime value disagree on the shape of a field."""

    @classmethod
    def conversion(cls, direction, field, native_kind, avro_type):
        if direction == "encode":
            message = f"cannot encode field {field} of kind {native_kind} to {avro_type}"
        else:
            message = f"cannot decode {avro_type} to field {field} of kind {native_kind}"
        return cls(message, field)


class InvalidUnionIndex(SchemaMismatchError):
    def __init__(self, index, field, branches):
        super().__init__(
            f"invalid union index {index} for field {field} "
            + f"(union has {branches} branches)",
            field,
        )
        self.index = index


class MissingFieldError(CodecError):
    """A schema field has no counterpart on the value and no usable default."""
