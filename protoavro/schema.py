"""Parsing of avro schemas into the form the codecs consume.

Parsed schemas keep fastavro's representation: primitives are strings,
unions are lists and every other type is a dict. Named types are stored
once in ``named_schemas`` under their fullname; later references to them
stay as the fullname string and are resolved through that dictionary.
"""

import re
from typing import Optional, Set, Tuple, Any

from .const import PRIMITIVES
from .types import DictSchema, Schema, NamedSchemas

SYMBOL_REGEX = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
NO_DEFAULT = object()

RESERVED_PROPERTIES = {
    "type",
    "name",
    "namespace",
    "fields",  # Record
    "items",  # Array
    "size",  # Fixed
    "symbols",  # Enum
    "values",  # Map
    "doc",
}

OPTIONAL_FIELD_PROPERTIES = {
    "doc",
    "aliases",
    "default",
}

RESERVED_FIELD_PROPERTIES = {"type", "name"} | OPTIONAL_FIELD_PROPERTIES


class UnknownType(ValueError):
    def __init__(self, name):
        super().__init__(name)
        self.name = name


class SchemaParseException(Exception):
    pass


def extract_record_type(schema):
    if isinstance(schema, dict):
        return schema["type"]

    if isinstance(schema, list):
        return "union"

    return schema


def resolve(schema, named_schemas):
    """Returns the definition behind a named type reference, or the schema
    itself when it is not a reference."""
    if isinstance(schema, str) and schema not in PRIMITIVES:
        try:
            return named_schemas[schema]
        except KeyError:
            raise UnknownType(schema)
    return schema


def null_index(union):
    """Index of the null branch of a union, -1 when it has none."""
    for index, branch in enumerate(union):
        if extract_record_type(branch) == "null":
            return index
    return -1


def is_nullable(union):
    """True when exactly one branch of the union is null."""
    return sum(1 for s in union if extract_record_type(s) == "null") == 1


def is_nullable_union(union):
    """True for the optional-value shape: a two branch union where one
    branch is null."""
    return len(union) == 2 and is_nullable(union)


def short_name(name):
    return name.rsplit(".", 1)[-1]


def fullname(schema: DictSchema) -> str:
    """Returns the fullname of a schema

    Example::

        from protoavro.schema import fullname

        schema = {
            'name': 'Account',
            'namespace': 'test',
            'type': 'record',
            'fields': [{'name': 'id', 'type': 'int'}],
        }

        assert fullname(schema) == "test.Account"
    """
    return schema_name(schema, "")[1]


def schema_name(schema: DictSchema, parent_ns: str) -> Tuple[str, str]:
    try:
        name = schema["name"]
    except KeyError:
        raise SchemaParseException(
            f'"name" is a required field missing from the schema: {schema}'
        )

    namespace = schema.get("namespace", parent_ns)
    if "." in name:
        return name.rsplit(".", 1)[0], name
    elif namespace:
        return namespace, f"{namespace}.{name}"
    else:
        return "", name


def parse_schema(
    schema: Schema,
    named_schemas: Optional[NamedSchemas] = None,
) -> Schema:
    """Returns a parsed avro schema

    Parsing a schema once and keeping the result lets the codec cache
    recognise it on every later call; the parsed record carries a marker so
    passing it back in here returns it unchanged.

    Parameters
    ----------
    schema
        Input schema
    named_schemas
        Dictionary of named schemas to their schema definition. Pass the
        same dictionary when parsing several schemas that reference each
        other.


    Example::

        from protoavro import parse_schema, marshal

        parsed_schema = parse_schema(account_schema)
        data = marshal(parsed_schema, account)
    """
    if named_schemas is None:
        named_schemas = {}

    if isinstance(schema, dict) and "__protoavro_parsed" in schema:
        named_schemas.update(schema["__named_schemas"])
        return schema

    return _parse_schema(schema, "", set(), named_schemas, True)


def _parse_schema(
    schema: Schema,
    namespace: str,
    names: Set[str],
    named_schemas: NamedSchemas,
    write_hint: bool,
) -> Schema:
    # union schemas
    if isinstance(schema, list):
        return [
            _parse_schema(s, namespace, names, named_schemas, False) for s in schema
        ]

    # string schemas; this could be either a named schema or a primitive type
    elif not isinstance(schema, dict):
        if schema in PRIMITIVES:
            return schema

        if "." not in schema and namespace:
            schema = namespace + "." + schema

        if schema not in named_schemas:
            raise UnknownType(schema)
        return schema

    schema_type = schema["type"]

    parsed_schema = {
        key: value for key, value in schema.items() if key not in RESERVED_PROPERTIES
    }
    parsed_schema["type"] = schema_type

    if "doc" in schema:
        parsed_schema["doc"] = schema["doc"]

    if schema_type == "array":
        parsed_schema["items"] = _parse_schema(
            schema["items"], namespace, names, named_schemas, False
        )

    elif schema_type == "map":
        parsed_schema["values"] = _parse_schema(
            schema["values"], namespace, names, named_schemas, False
        )

    elif schema_type == "enum":
        _, name = _register(schema, namespace, names)
        _validate_enum_symbols(schema)

        named_schemas[name] = parsed_schema
        parsed_schema["name"] = name
        parsed_schema["symbols"] = schema["symbols"]

    elif schema_type == "fixed":
        _, name = _register(schema, namespace, names)

        named_schemas[name] = parsed_schema
        parsed_schema["name"] = name
        parsed_schema["size"] = schema["size"]

    elif schema_type == "record" or schema_type == "error":
        namespace, name = _register(schema, namespace, names)

        named_schemas[name] = parsed_schema
        parsed_schema["name"] = name
        parsed_schema["fields"] = [
            parse_field(field, namespace, names, named_schemas)
            for field in schema.get("fields", [])
        ]

        if write_hint:
            # Store a copy so the registry does not reference the hinted
            # schema (and through it, itself)
            named_schemas[name] = {k: v for k, v in parsed_schema.items()}

            parsed_schema["__protoavro_parsed"] = True
            parsed_schema["__named_schemas"] = named_schemas

    elif schema_type in PRIMITIVES:
        # {"type": "int"} is the same thing as "int"
        if len(parsed_schema) == 1:
            return schema_type

    else:
        raise UnknownType(schema_type)

    return parsed_schema


def _register(schema, namespace, names):
    namespace, name = schema_name(schema, namespace)
    if name in names:
        raise SchemaParseException(f"redefined named type: {name}")
    names.add(name)
    return namespace, name


def parse_field(field, namespace, names, named_schemas):
    parsed_field: Any = {
        key: value for key, value in field.items() if key not in RESERVED_FIELD_PROPERTIES
    }

    for prop in OPTIONAL_FIELD_PROPERTIES:
        if prop in field:
            parsed_field[prop] = field[prop]

    parsed_field["name"] = field["name"]
    parsed_field["type"] = _parse_schema(
        field["type"], namespace, names, named_schemas, False
    )

    return parsed_field


def _validate_enum_symbols(schema):
    symbols = schema["symbols"]
    for symbol in symbols:
        if not isinstance(symbol, str) or not re.match(SYMBOL_REGEX, symbol):
            raise SchemaParseException(
                "Every symbol must match the regular expression [A-Za-z_][A-Za-z0-9_]*"
            )
    if len(symbols) != len(set(symbols)):
        raise SchemaParseException("All symbols in an enum must be unique")

    if "default" in schema and schema["default"] not in symbols:
        raise SchemaParseException("Default value for enum must be in symbols list")
