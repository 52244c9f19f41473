from io import BytesIO

import pytest

import protoavro


def roundtrip(schema, record, *, writer_kwargs={}):
    new_file = BytesIO()
    protoavro.schemaless_writer(new_file, schema, record, **writer_kwargs)
    new_file.seek(0)
    new_record = protoavro.schemaless_reader(new_file, schema)
    return new_record


def test_schemaless_writer_and_reader():
    schema = {
        "type": "record",
        "name": "Test",
        "namespace": "test",
        "fields": [{"name": "field", "type": {"type": "string"}}],
    }
    record = {"field": "test"}
    assert record == roundtrip(schema, record)


def test_schemaless_writer_and_reader_with_union():
    schema = {
        "name": "Message",
        "type": "record",
        "namespace": "test",
        "fields": [
            {"name": "id", "type": "long"},
            {
                "name": "payload",
                "type": [
                    {
                        "name": "ApplicationCreated",
                        "type": "record",
                        "fields": [
                            {"name": "applicationId", "type": "string"},
                            {"name": "data", "type": "string"},
                        ],
                    },
                    {
                        "name": "ApplicationSubmitted",
                        "type": "record",
                        "fields": [
                            {"name": "applicationId", "type": "string"},
                            {"name": "data", "type": "string"},
                        ],
                    },
                ],
            },
        ],
    }
    record = {
        "id": 123,
        "payload": (
            "test.ApplicationSubmitted",
            {"applicationId": "123456789UT", "data": "..."},
        ),
    }
    data = protoavro.marshal(schema, record)

    # the tuple picks the second branch
    assert data[2:3] == b"\x02"
    assert protoavro.unmarshal(schema, data) == {
        "id": 123,
        "payload": {"applicationId": "123456789UT", "data": "..."},
    }


def test_all_primitives():
    schema = {
        "type": "record",
        "name": "Primitives",
        "fields": [
            {"name": "n", "type": "null"},
            {"name": "b", "type": "boolean"},
            {"name": "i", "type": "int"},
            {"name": "l", "type": "long"},
            {"name": "f", "type": "float"},
            {"name": "d", "type": "double"},
            {"name": "s", "type": "string"},
            {"name": "raw", "type": "bytes"},
            {"name": "e", "type": {"type": "enum", "name": "E", "symbols": ["X", "Y"]}},
            {"name": "fx", "type": {"type": "fixed", "name": "F", "size": 2}},
        ],
    }
    record = {
        "n": None,
        "b": True,
        "i": -2147483648,
        "l": 9223372036854775807,
        "f": 0.5,
        "d": -1.25,
        "s": "ünïcode",
        "raw": b"\x00\x01",
        "e": "Y",
        "fx": b"ab",
    }
    assert roundtrip(schema, record) == record


def test_boolean_roundtrip():
    schema = {
        "type": "record",
        "name": "test_boolean_roundtrip",
        "fields": [{"name": "field", "type": "boolean"}],
    }
    record = {"field": True}
    assert record == roundtrip(schema, record)

    record = {"field": False}
    assert record == roundtrip(schema, record)


def test_default_used_for_missing_field():
    schema = {
        "type": "record",
        "name": "Defaults",
        "fields": [
            {"name": "a", "type": "int", "default": 5},
            {"name": "b", "type": ["null", "string"]},
        ],
    }
    assert roundtrip(schema, {}) == {"a": 5, "b": None}


def test_missing_field_without_default():
    schema = {
        "type": "record",
        "name": "Defaults",
        "fields": [{"name": "a", "type": "int"}],
    }
    with pytest.raises(ValueError, match="no value and no default for a"):
        roundtrip(schema, {})


def test_union_prefers_double_for_floats():
    schema = {
        "type": "record",
        "name": "Numbers",
        "fields": [{"name": "value", "type": ["null", "float", "double"]}],
    }
    data = protoavro.marshal(schema, {"value": 0.1})
    assert data[:1] == b"\x04"
    assert protoavro.unmarshal(schema, data) == {"value": 0.1}


def test_newer_versions_of_named_schemas_2():
    schema = {
        "name": "Weather",
        "type": "record",
        "fields": [
            {
                "name": "place1",
                "type": {
                    "name": "Location",
                    "type": "record",
                    "fields": [{"name": "city", "type": "string"}],
                },
            },
            {
                "name": "place2",
                "type": "Location",
            },
        ],
    }

    example_1 = {"place1": {"city": "London"}, "place2": {"city": "Berlin"}}
    parsed_schema = protoavro.parse_schema(schema)

    assert example_1 == roundtrip(parsed_schema, example_1)


def test_strict_option():
    schema = {
        "namespace": "namespace",
        "name": "name",
        "type": "record",
        "fields": [
            {"name": "field_1", "type": "boolean"},
            {"name": "field_2", "type": ["null", "string"], "default": None},
        ],
    }

    test_record1 = {"field_1": True, "field_2": "foo", "field_3": "something"}
    test_record2 = {"field_1": True}
    test_record3 = {"field_2": "foo"}

    with pytest.raises(ValueError, match="field_3"):
        roundtrip(schema, test_record1, writer_kwargs={"strict": True})

    with pytest.raises(ValueError, match="field_2 is specified .*? but missing"):
        roundtrip(schema, test_record2, writer_kwargs={"strict": True})

    with pytest.raises(ValueError, match="field_1 is specified .*? but missing"):
        roundtrip(schema, test_record3, writer_kwargs={"strict": True})


def test_strict_allow_default_option():
    schema = {
        "namespace": "namespace",
        "name": "name",
        "type": "record",
        "fields": [
            {"name": "field_1", "type": "boolean"},
            {"name": "field_2", "type": ["null", "string"], "default": None},
        ],
    }

    test_record1 = {"field_1": True, "field_2": "foo", "field_3": "something"}
    test_record2 = {"field_1": True}
    test_record3 = {"field_2": "foo"}

    with pytest.raises(ValueError, match="field_3"):
        roundtrip(schema, test_record1, writer_kwargs={"strict_allow_default": True})

    roundtrip(schema, test_record2, writer_kwargs={"strict_allow_default": True})

    with pytest.raises(ValueError, match="field_1 is specified .*? but missing"):
        roundtrip(schema, test_record3, writer_kwargs={"strict_allow_default": True})


def test_disable_tuple_notation_option():
    schema = {
        "namespace": "namespace",
        "name": "name",
        "type": "record",
        "fields": [
            {"name": "foo", "type": ["string", {"type": "array", "items": "string"}]}
        ],
    }

    new_record = roundtrip(
        schema, {"foo": ("string", "0")}, writer_kwargs={"disable_tuple_notation": True}
    )
    assert new_record == {"foo": ["string", "0"]}


def test_wrong_type_names_field():
    schema = {
        "type": "record",
        "name": "Typed",
        "fields": [{"name": "count", "type": "string"}],
    }
    with pytest.raises(TypeError, match="on field count"):
        roundtrip(schema, {"count": 3})


def test_bad_union_index_in_generic_reader():
    schema = {
        "type": "record",
        "name": "Optional",
        "fields": [{"name": "value", "type": ["null", "int"]}],
    }
    with pytest.raises(protoavro.InvalidUnionIndex):
        protoavro.unmarshal(schema, b"\x04")


def test_bad_enum_index():
    schema = {"type": "enum", "name": "E", "symbols": ["X", "Y"]}
    with pytest.raises(ValueError, match="out of range"):
        protoavro.unmarshal(schema, b"\x06")
