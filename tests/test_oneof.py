import pytest

import protoavro
from protoavro import SchemaMismatchError

from protos import Address, Event

address_schema = {
    "type": "record",
    "name": "Address",
    "fields": [
        {"name": "city", "type": "string"},
        {"name": "zip", "type": "int"},
    ],
}


def event_schema(payload_type):
    return {
        "type": "record",
        "name": "Event",
        "namespace": "test",
        "fields": [
            {"name": "id", "type": "string"},
            {"name": "payload", "type": payload_type},
        ],
    }


schema = event_schema(["null", "string", "long", address_schema])


@pytest.mark.parametrize(
    "event,expected",
    [
        (Event(id="e1"), b"\x04e1\x00"),
        (Event(id="e1", text="hi"), b"\x04e1\x02\x04hi"),
        (Event(id="e1", number=5), b"\x04e1\x04\x0a"),
        (
            Event(id="e1", address=Address(city="A", zip=1)),
            b"\x04e1\x06\x02A\x02",
        ),
    ],
)
def test_oneof_branch_index(event, expected):
    data = protoavro.marshal(schema, event)
    assert data == expected

    decoded = protoavro.unmarshal(schema, data, Event)
    assert decoded == event
    assert decoded.WhichOneof("payload") == event.WhichOneof("payload")


def test_null_branch_clears_oneof():
    event = Event(id="old", text="stale")

    protoavro.unmarshal(schema, b"\x04e1\x00", event)

    assert event.id == "e1"
    assert event.WhichOneof("payload") is None


def test_decoding_switches_member():
    event = Event(id="e1", text="stale")

    protoavro.unmarshal(schema, b"\x04e1\x04\x0a", event)

    assert event.WhichOneof("payload") == "number"
    assert event.number == 5


def test_oneof_decodes_to_dict():
    data = protoavro.marshal(schema, Event(id="e1", number=5))
    assert protoavro.unmarshal(schema, data) == {"id": "e1", "payload": 5}


def test_unset_oneof_without_null_branch():
    with pytest.raises(SchemaMismatchError, match="oneof payload is not set"):
        protoavro.marshal(event_schema(["string", "long"]), Event(id="x"))


def test_oneof_needs_union_schema():
    with pytest.raises(SchemaMismatchError, match="expected union schema"):
        protoavro.marshal(event_schema("string"), Event(id="x", text="y"))


def test_member_without_matching_branch():
    with pytest.raises(SchemaMismatchError, match="oneof field number"):
        protoavro.marshal(event_schema(["null", "string"]), Event(id="x", number=5))


def test_branch_without_matching_member():
    data = protoavro.marshal(event_schema(["null", "double"]), {"id": "x", "payload": 1.5})
    with pytest.raises(SchemaMismatchError, match="no matching field found"):
        protoavro.unmarshal(event_schema(["null", "double"]), data, Event)


def test_member_as_own_field():
    member_schema = {
        "type": "record",
        "name": "Event",
        "fields": [
            {"name": "id", "type": "string"},
            {"name": "text", "type": ["null", "string"], "default": None},
        ],
    }
    event = Event(id="e1", text="hi")

    data = protoavro.marshal(member_schema, event)

    assert data == b"\x04e1\x02\x04hi"
    assert protoavro.marshal(member_schema, Event(id="e1")) == b"\x04e1\x00"
    assert protoavro.unmarshal(member_schema, data, Event) == event
