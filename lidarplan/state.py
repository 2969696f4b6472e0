from __future__ import annotations
import json
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from .errors import DecodeError
from .models import Door, Project, Room, Window, utcnow
from .utils import room_color

_MISSING = object()


# ===== Encode =====

def room_to_dict(r: Room) -> Dict:
    return {"id": r.id, "name": r.name, "x": r.x, "z": r.z,
            "width": r.width, "length": r.length, "height": r.height, "color": r.color}

def door_to_dict(d: Door) -> Dict:
    data = {"id": d.id, "x": d.x, "z": d.z, "width": d.width,
            "isExterior": d.is_exterior, "connectsRooms": list(d.connects_rooms)}
    if d.label is not None:
        data["label"] = d.label
    return data

def window_to_dict(w: Window) -> Dict:
    data = {"id": w.id, "x": w.x, "z": w.z, "width": w.width,
            "height": w.height, "fromFloor": w.from_floor}
    if w.room_id is not None:
        data["roomId"] = w.room_id
    return data

def project_to_dict(p: Project) -> Dict:
    return {
        "id": p.id,
        "name": p.name,
        "dateCreated": p.date_created.isoformat(),
        "dateModified": p.date_modified.isoformat(),
        "rooms": [room_to_dict(r) for r in p.rooms],
        "doors": [door_to_dict(d) for d in p.doors],
        "windows": [window_to_dict(w) for w in p.windows],
    }

def _dumps(data) -> str:
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False, allow_nan=False)

def dump_project(p: Project) -> str:
    return _dumps(project_to_dict(p))

def encode_project(p: Project) -> bytes:
    """Canonical JSON export: sorted keys, 2-space indent, ISO-8601 dates."""
    return dump_project(p).encode("utf-8")

def encode_project_list(projects: List[Project]) -> str:
    return _dumps([project_to_dict(p) for p in projects])


# ===== Decode =====

def _field(d: Dict, key: str, where: str, kind, default=_MISSING):
    if key not in d or d[key] is None:
        if default is _MISSING:
            raise DecodeError(f"{where}: missing '{key}'")
        return default
    v = d[key]
    if kind is float:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise DecodeError(f"{where}: '{key}' must be a number")
        try:
            v = float(v)
        except OverflowError:
            raise DecodeError(f"{where}: '{key}' is out of range") from None
        if not math.isfinite(v):
            raise DecodeError(f"{where}: '{key}' must be a finite number")
        return v
    if not isinstance(v, kind):
        raise DecodeError(f"{where}: '{key}' has the wrong type")
    return v

def _date(d: Dict, key: str, default: datetime) -> datetime:
    raw = _field(d, key, "project", str, None)
    if raw is None:
        return default
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        raise DecodeError(f"project: '{key}' is not an ISO-8601 timestamp") from None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)

def _object(v, where: str) -> Dict:
    if not isinstance(v, dict):
        raise DecodeError(f"{where}: expected an object")
    return v

def room_from_dict(d: Dict, index: int = 0) -> Room:
    where = f"rooms[{index}]"
    d = _object(d, where)
    try:
        return Room(
            id=_field(d, "id", where, str),
            name=_field(d, "name", where, str),
            x=_field(d, "x", where, float),
            z=_field(d, "z", where, float),
            width=_field(d, "width", where, float),
            length=_field(d, "length", where, float),
            height=_field(d, "height", where, float),
            color=_field(d, "color", where, str, room_color(index)),
        )
    except ValueError as e:
        if isinstance(e, DecodeError): raise
        raise DecodeError(f"{where}: {e}") from e

def door_from_dict(d: Dict, index: int = 0) -> Door:
    where = f"doors[{index}]"
    d = _object(d, where)
    rooms = _field(d, "connectsRooms", where, list, [])
    if not all(isinstance(r, str) for r in rooms):
        raise DecodeError(f"{where}: 'connectsRooms' must hold room ids")
    try:
        return Door(
            id=_field(d, "id", where, str),
            x=_field(d, "x", where, float),
            z=_field(d, "z", where, float),
            width=_field(d, "width", where, float),
            is_exterior=_field(d, "isExterior", where, bool, False),
            label=_field(d, "label", where, str, None),
            connects_rooms=list(rooms),
        )
    except ValueError as e:
        if isinstance(e, DecodeError): raise
        raise DecodeError(f"{where}: {e}") from e

def window_from_dict(d: Dict, index: int = 0) -> Window:
    where = f"windows[{index}]"
    d = _object(d, where)
    try:
        return Window(
            id=_field(d, "id", where, str),
            x=_field(d, "x", where, float),
            z=_field(d, "z", where, float),
            width=_field(d, "width", where, float),
            height=_field(d, "height", where, float),
            from_floor=_field(d, "fromFloor", where, float),
            room_id=_field(d, "roomId", where, str, None),
        )
    except ValueError as e:
        if isinstance(e, DecodeError): raise
        raise DecodeError(f"{where}: {e}") from e

def project_from_dict(data: Any) -> Project:
    d = _object(data, "project")
    pid = _field(d, "id", "project", str)
    name = _field(d, "name", "project", str)
    rooms = _field(d, "rooms", "project", list)
    doors = _field(d, "doors", "project", list, [])
    windows = _field(d, "windows", "project", list, [])
    created = _date(d, "dateCreated", utcnow())
    modified = _date(d, "dateModified", created)
    if modified < created:
        raise DecodeError("project: 'dateModified' is earlier than 'dateCreated'")
    return Project(
        id=pid, name=name, date_created=created, date_modified=modified,
        rooms=[room_from_dict(r, i) for i, r in enumerate(rooms)],
        doors=[door_from_dict(x, i) for i, x in enumerate(doors)],
        windows=[window_from_dict(x, i) for i, x in enumerate(windows)],
    )

def _loads(data: Union[bytes, bytearray, str]):
    try:
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("utf-8")
        return json.loads(data)
    except (ValueError, RecursionError) as e:
        # also over-long integer literals and very deep nesting
        raise DecodeError(f"Not a valid JSON document: {e}") from e

def decode_project(data: Union[bytes, bytearray, str]) -> Project:
    return project_from_dict(_loads(data))

def decode_project_list(data: Optional[Union[bytes, str]]) -> List[Project]:
    if not data:
        return []
    items = _loads(data)
    if not isinstance(items, list):
        raise DecodeError("Project list must be a JSON array")
    return [project_from_dict(p) for p in items]
