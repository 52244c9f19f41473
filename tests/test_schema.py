import pytest

import protoavro
from protoavro.schema import (
    SchemaParseException,
    UnknownType,
    fullname,
    is_nullable_union,
    null_index,
    parse_schema,
    resolve,
)


def test_named_types_have_names():
    record_schema = {"type": "record", "fields": [{"name": "field", "type": "string"}]}

    with pytest.raises(SchemaParseException):
        protoavro.parse_schema(record_schema)

    enum_schema = {"type": "enum", "symbols": ["FOO"]}

    with pytest.raises(SchemaParseException):
        protoavro.parse_schema(enum_schema)

    # Should parse with name
    for schema in (record_schema, enum_schema):
        schema["name"] = "test_named_types_have_names"
        protoavro.parse_schema(schema)


def test_parse_schema():
    schema = {
        "type": "record",
        "name": "test_parse_schema",
        "fields": [{"name": "field", "type": "string"}],
    }

    parsed_schema = parse_schema(schema)
    assert "__protoavro_parsed" in parsed_schema

    parsed_schema_again = parse_schema(parsed_schema)
    assert parsed_schema_again is parsed_schema


def test_parsed_schema_carries_named_types():
    schema = {
        "type": "record",
        "name": "Person",
        "namespace": "test",
        "fields": [
            {
                "name": "address",
                "type": {
                    "type": "record",
                    "name": "Address",
                    "fields": [{"name": "city", "type": "string"}],
                },
            },
            {"name": "previous", "type": ["null", "Address"]},
        ],
    }

    named_schemas = {}
    parsed_schema = parse_schema(schema, named_schemas)

    assert set(named_schemas) == {"test.Person", "test.Address"}
    assert parsed_schema["fields"][1]["type"] == ["null", "test.Address"]
    assert "__protoavro_parsed" not in named_schemas["test.Person"]

    other = {}
    parse_schema(parsed_schema, other)
    assert set(other) == {"test.Person", "test.Address"}


def test_unknown_type():
    with pytest.raises(UnknownType):
        parse_schema({"type": "unknown"})


def test_unknown_reference():
    schema = {
        "type": "record",
        "name": "Person",
        "fields": [{"name": "address", "type": "Address"}],
    }
    with pytest.raises(UnknownType) as exc:
        parse_schema(schema)
    assert exc.value.name == "Address"


def test_named_type_cannot_be_redefined():
    schema = {
        "type": "record",
        "namespace": "test.avro.training",
        "name": "SomeMessage",
        "fields": [
            {
                "name": "is_error",
                "type": "boolean",
                "default": False,
            },
            {
                "name": "outcome",
                "type": [
                    "SomeMessage",
                    {
                        "type": "record",
                        "name": "SomeMessage",
                        "fields": [{"name": "a", "type": "string"}],
                    },
                ],
            },
        ],
    }

    with pytest.raises(SchemaParseException, match="redefined named type"):
        parse_schema(schema)


def test_primitive_dict_collapses():
    assert parse_schema({"type": "int"}) == "int"
    assert parse_schema("string") == "string"


def test_schema_fullname_api():
    schema = {
        "type": "record",
        "name": "Test",
        "namespace": "test_namespace",
        "fields": [],
    }

    assert fullname(schema) == "test_namespace.Test"


def test_doc_left_in_parse_schema():
    schema = {
        "type": "record",
        "name": "test_doc_left_in_parse_schema",
        "doc": "blah",
        "fields": [{"name": "field1", "type": "string", "default": ""}],
    }
    assert parse_schema(schema)["doc"] == "blah"


@pytest.mark.parametrize(
    "symbol",
    [None, 0, "8_BALL", " padded"],
)
def test_enum_symbols_validation__invalid(symbol):
    schema = {"type": "enum", "name": "Test", "symbols": [symbol]}
    with pytest.raises(SchemaParseException):
        parse_schema(schema)


def test_enum_symbols_validation__uniqueness():
    schema = {"type": "enum", "name": "Test", "symbols": ["A", "A"]}
    with pytest.raises(SchemaParseException, match="must be unique"):
        parse_schema(schema)


@pytest.mark.parametrize(
    "union,index,nullable",
    [
        (["null", "string"], 0, True),
        (["string", "null"], 1, True),
        (["null", "string", "int"], 0, False),
        (["string", "int"], -1, False),
    ],
)
def test_union_helpers(union, index, nullable):
    assert null_index(union) == index
    assert is_nullable_union(union) is nullable


def test_resolve():
    named_schemas = {"test.Address": {"type": "record", "name": "test.Address"}}

    assert resolve("int", named_schemas) == "int"
    assert resolve("test.Address", named_schemas) is named_schemas["test.Address"]
    with pytest.raises(UnknownType):
        resolve("test.Missing", named_schemas)
