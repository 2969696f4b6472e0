import json

import pytest

from lidarplan.errors import DecodeError
from lidarplan.models import Project, Room
from lidarplan.state import (decode_project, decode_project_list, encode_project, encode_project_list,
                             project_to_dict)
from lidarplan.utils import ROOM_PALETTE


def minimal(**overrides):
    data = {"id": "p1", "name": "Scan", "rooms": []}
    data.update(overrides)
    return data


def test_round_trip(sample_project):
    assert decode_project(encode_project(sample_project)) == sample_project


def test_round_trip_through_text(sample_project):
    assert decode_project(encode_project(sample_project).decode("utf-8")) == sample_project


def test_wire_format_uses_camel_case(sample_project):
    data = json.loads(encode_project(sample_project))
    assert set(data) == {"id", "name", "dateCreated", "dateModified", "rooms", "doors", "windows"}
    ext = next(d for d in data["doors"] if d["isExterior"])
    assert ext["label"] == "Front Entry"
    assert ext["connectsRooms"] == ["living-room"]
    assert "label" not in data["doors"][0]
    assert data["windows"][0]["fromFloor"] == 3
    assert data["windows"][0]["roomId"] == "living-room"


def test_output_is_pretty_and_sorted(sample_project):
    text = encode_project(sample_project).decode("utf-8")
    assert text.startswith('{\n  "dateCreated"')


def test_minimal_document():
    p = decode_project(json.dumps(minimal()))
    assert p.id == "p1" and p.rooms == [] and p.doors == [] and p.windows == []
    assert p.date_modified >= p.date_created


def test_missing_color_uses_palette():
    room = {"id": "r", "name": "A", "x": 0, "z": 0, "width": 1, "length": 1, "height": 8}
    p = decode_project(json.dumps(minimal(rooms=[room, dict(room, id="s")])))
    assert [r.color for r in p.rooms] == ROOM_PALETTE[:2]


@pytest.mark.parametrize("payload", [
    b"\xff\xfe not utf-8",
    b"{ not json",
    b"[]",
    json.dumps({"name": "x", "rooms": []}),
    json.dumps({"id": 1, "name": "x", "rooms": []}),
    json.dumps({"id": "p", "name": "x"}),
    json.dumps(minimal(rooms={})),
    json.dumps(minimal(rooms=[{"id": "r", "name": "A", "x": 0, "z": 0, "width": "12", "length": 1, "height": 8}])),
    json.dumps(minimal(rooms=[{"id": "r", "name": "A", "x": 0, "z": 0, "width": True, "length": 1, "height": 8}])),
    json.dumps(minimal(rooms=[{"id": "r", "name": "A", "x": 0, "z": 0, "width": 0, "length": 1, "height": 8}])),
    json.dumps(minimal(rooms=[{"id": "r", "name": "A", "x": 0, "z": 0, "width": 1, "length": 1, "height": 8,
                               "color": "red"}])),
    json.dumps(minimal(doors=[{"id": "d", "x": 0, "z": 0, "width": 3, "connectsRooms": ["a", "b", "c"]}])),
    json.dumps(minimal(windows=[{"id": "w", "x": 0, "z": 0, "width": 3}])),
    json.dumps(minimal(dateCreated="yesterday")),
    json.dumps(minimal(dateCreated="2024-12-15T10:00:00+00:00", dateModified="2024-12-14T10:00:00+00:00")),
    '{"id": "a", "name": "b", "rooms": [], "extra": ' + "1" * 5000 + "}",
    "[" * 200000 + "]" * 200000,
    '{"id": "a", "name": "b", "rooms": [{"id": "r", "name": "A", "x": 0, "z": 0, "width": Infinity, "length": 1, "height": 8}]}',
    '{"id": "a", "name": "b", "rooms": [{"id": "r", "name": "A", "x": NaN, "z": 0, "width": 1, "length": 1, "height": 8}]}',
    json.dumps(minimal(windows=[{"id": "w", "x": 0, "z": 0, "width": 3, "height": 4, "fromFloor": 1e400}])),
])
def test_malformed_payloads_raise(payload):
    with pytest.raises(DecodeError):
        decode_project(payload)


def test_decode_error_is_value_error():
    with pytest.raises(ValueError):
        decode_project("null")


def test_naive_timestamps_are_utc():
    p = decode_project(json.dumps(minimal(dateCreated="2024-12-15T10:00:00")))
    assert p.date_created.utcoffset().total_seconds() == 0
    assert p.date_modified == p.date_created


def test_project_list():
    a, b = Project("A", rooms=[Room("R")]), Project("B")
    assert decode_project_list(encode_project_list([a, b])) == [a, b]
    assert decode_project_list("") == []
    assert decode_project_list(None) == []
    with pytest.raises(DecodeError):
        decode_project_list(json.dumps(project_to_dict(a)))


def test_encode_refuses_non_finite_numbers():
    p = Project("P", rooms=[Room("A")])
    p.rooms[0].width = float("inf")
    with pytest.raises(ValueError):
        encode_project(p)
