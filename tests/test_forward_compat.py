import logging

import pytest

import protoavro

from protos import Account, Slim


def account_schema_with(extra_type):
    return {
        "type": "record",
        "name": "Account",
        "namespace": "test",
        "fields": [
            {"name": "id", "type": "int"},
            {"name": "extra", "type": extra_type},
            {"name": "username", "type": "string"},
            {"name": "email", "type": ["null", "string"], "default": None},
        ],
    }


@pytest.mark.parametrize(
    "extra_type,extra",
    [
        ("long", 99),
        ("string", "ignored"),
        ("double", 1.5),
        (
            {
                "type": "record",
                "name": "Address",
                "fields": [
                    {"name": "city", "type": "string"},
                    {"name": "zip", "type": "int"},
                ],
            },
            {"city": "X", "zip": 3},
        ),
        ({"type": "array", "items": "string"}, ["a", "b"]),
        ({"type": "map", "values": "int"}, {"k": 1, "j": 2}),
        (["null", "bytes"], b"\x01\x02"),
        ({"type": "enum", "name": "Kind", "symbols": ["A", "B"]}, "B"),
        ({"type": "fixed", "name": "Hash", "size": 4}, b"abcd"),
    ],
)
def test_extra_field_is_skipped(extra_type, extra):
    schema = account_schema_with(extra_type)
    data = protoavro.marshal(
        schema, {"id": 1001, "extra": extra, "username": "jdoe", "email": "a@b.com"}
    )

    decoded = protoavro.unmarshal(schema, data, Account)

    assert decoded == Account(id=1001, username="jdoe", email="a@b.com")


def test_only_known_fields_populated():
    schema = account_schema_with("long")
    data = protoavro.marshal(
        schema, {"id": 7, "extra": 1, "username": "jdoe", "email": None}
    )

    assert protoavro.unmarshal(schema, data, Slim) == Slim(id=7)


def test_skipped_field_is_logged(caplog):
    schema = account_schema_with("long")
    data = protoavro.marshal(
        schema, {"id": 7, "extra": 1, "username": "jdoe", "email": None}
    )

    with caplog.at_level(logging.DEBUG, logger="protoavro"):
        protoavro.unmarshal(schema, data, Account)

    assert "skipping field extra absent from test.Account" in caplog.text
