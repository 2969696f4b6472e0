import pytest

from lidarplan.models import (Door, DoorDraft, ExportFormat, Project, Room, RoomDraft, Window,
                              WindowDraft, export_filename)
from lidarplan.utils import ROOM_PALETTE, snap


def test_room_derived_values():
    r = Room("Den", width=12, length=10, height=9)
    assert r.area == 120
    assert r.volume == 1080
    assert r.perimeter == 44
    assert r.center == (6, 5)


@pytest.mark.parametrize("kw", [{"width": 0}, {"length": -3}, {"height": 0}, {"color": "blue"}])
def test_room_rejects_bad_values(kw):
    with pytest.raises(ValueError):
        Room("Bad", **kw)


def test_total_area_and_bounds(sample_project):
    assert sample_project.total_area == 18 * 24 + 14 * 12 * 2 + 8 * 10 + 14 * 14
    assert sample_project.room_count == 5
    assert sample_project.bounds() == (46, 24)
    assert Project("Empty").bounds() == (50, 40)


def test_touch_is_strictly_monotonic():
    p = Project("P")
    seen = [p.date_modified]
    for _ in range(20):
        p.touch()
        assert p.date_modified > seen[-1]
        seen.append(p.date_modified)
    assert p.date_modified >= p.date_created


def test_mutations_touch_project():
    p = Project("P")
    before = p.date_modified
    room = Room("A")
    p.add_room(room)
    assert p.date_modified > before
    stamp = p.date_modified
    assert p.update_room(Room("B", id=room.id))
    assert p.rooms[0].name == "B"
    assert p.date_modified > stamp


def test_update_unknown_room_is_noop():
    p = Project("P", rooms=[Room("A")])
    stamp = p.date_modified
    assert not p.update_room(Room("Ghost"))
    assert p.date_modified == stamp
    assert [r.name for r in p.rooms] == ["A"]


def test_delete_keeps_order():
    a, b, c = Room("A"), Room("B"), Room("C")
    p = Project("P", rooms=[a, b, c])
    p.delete_room(b.id)
    assert [r.name for r in p.rooms] == ["A", "C"]


def test_modified_before_created_rejected():
    p = Project("P")
    with pytest.raises(ValueError):
        Project("Q", date_created=p.date_created, date_modified=p.date_created.replace(year=2000))


def test_copy_is_deep(sample_project):
    twin = sample_project.copy()
    assert twin == sample_project
    twin.rooms[0].width = 99
    assert sample_project.rooms[0].width == 18


def test_door_connects_at_most_two_rooms():
    with pytest.raises(ValueError):
        Door(0, 0, connects_rooms=["a", "b", "c"])
    with pytest.raises(ValueError):
        Door(0, 0, width=0)


def test_window_defaults():
    w = Window(1, 2)
    assert (w.width, w.height, w.from_floor, w.room_id) == (4, 5, 3, None)


def test_room_draft_defaults():
    room = RoomDraft(width=10, length=14).to_room(index=2)
    assert room.name == "Room 3"
    assert room.color == ROOM_PALETTE[2]
    assert room.area == 140


def test_room_draft_validation():
    draft = RoomDraft(width=0, height=-1, color="nope")
    assert len(draft.validate()) == 3
    with pytest.raises(ValueError):
        draft.to_room()


def test_room_draft_from_room_keeps_values():
    room = Room("Office", 3, 4, 10, 11, 8.5, "#f8e8e8")
    back = RoomDraft.from_room(room).to_room(room_id=room.id)
    assert back == room


def test_door_draft():
    ext = DoorDraft(x=0, z=10, width=6, is_exterior=True, from_room="living").to_door()
    assert ext.label == "Door"
    assert ext.connects_rooms == ["living"]
    inner = DoorDraft(x=18, z=6, from_room="a", to_room="b").to_door()
    assert inner.label is None
    assert inner.connects_rooms == ["a", "b"]
    assert DoorDraft(from_room="a", to_room="a").validate()


def test_window_draft():
    w = WindowDraft(x=3, width=5, room_id="kitchen").to_window()
    assert w.room_id == "kitchen" and w.width == 5
    with pytest.raises(ValueError):
        WindowDraft(height=0).to_window()


def test_export_format_metadata():
    assert ExportFormat.JSON.file_extension == "json"
    assert ExportFormat.DXF.file_extension == "dxf"
    assert ExportFormat.PDF.mime_type == "application/pdf"
    assert ExportFormat.PNG.mime_type == "image/png"


def test_export_filename():
    p = Project("First Floor  Scan")
    assert export_filename(p, ExportFormat.PDF) == "First-Floor-Scan.pdf"
    assert export_filename(Project("  "), ExportFormat.PNG) == "floor-plan.png"


def test_snap_rounds_half_up():
    assert snap(9.75, 0.5) == 10.0
    assert snap(13.1, 0.5) == 13.0
    assert snap(2.25, 0.5) == 2.5


@pytest.mark.parametrize("kw", [{"width": float("inf")}, {"length": float("nan")}, {"x": float("nan")},
                                {"z": float("-inf")}])
def test_room_rejects_non_finite(kw):
    with pytest.raises(ValueError):
        Room("Bad", **kw)


def test_openings_reject_non_finite():
    with pytest.raises(ValueError):
        Door(float("nan"), 0)
    with pytest.raises(ValueError):
        Window(0, 0, from_floor=float("inf"))
