"""Floor-plan data model.

Rooms are axis-aligned rectangles in a shared plan coordinate system measured
in feet: ``x`` runs horizontally, ``z`` is depth (the vertical axis of the 2D
plan view) and ``(x, z)`` is the rectangle's top-left corner. Derived values
(area, volume, perimeter, total area) are always computed from the base
dimensions, never stored.
"""

from __future__ import annotations
import copy, math, re, uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional, Tuple

from .utils import (DEFAULT_ROOM_W, DEFAULT_ROOM_L, DEFAULT_ROOM_H, DEFAULT_EXTENT_X,
                    DEFAULT_EXTENT_Z, is_hex_color, room_color)


def new_id() -> str:
    return str(uuid.uuid4())

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def _require_finite(owner: str, **values: float):
    bad = [k for k, v in values.items() if not math.isfinite(v)]
    if bad:
        raise ValueError(f"{owner}: {', '.join(bad)} must be a finite number")

def _require_positive(owner: str, **values: float):
    _require_finite(owner, **values)
    bad = [k for k, v in values.items() if not v > 0]
    if bad:
        raise ValueError(f"{owner}: {', '.join(bad)} must be greater than 0")


@dataclass
class Room:
    name: str
    x: float = 0.0
    z: float = 0.0
    width: float = DEFAULT_ROOM_W
    length: float = DEFAULT_ROOM_L
    height: float = DEFAULT_ROOM_H
    color: str = "#e8f4f8"
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        _require_finite("Room", x=self.x, z=self.z)
        _require_positive("Room", width=self.width, length=self.length, height=self.height)
        if not is_hex_color(self.color):
            raise ValueError(f"Room: color {self.color!r} is not a 6-digit hex RGB value")

    @property
    def area(self) -> float:
        return self.width * self.length

    @property
    def volume(self) -> float:
        return self.width * self.length * self.height

    @property
    def perimeter(self) -> float:
        return 2 * (self.width + self.length)

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.z + self.length / 2


@dataclass
class Door:
    x: float
    z: float
    width: float = 3.0
    is_exterior: bool = False
    label: Optional[str] = None
    connects_rooms: List[str] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        _require_finite("Door", x=self.x, z=self.z)
        _require_positive("Door", width=self.width)
        if len(self.connects_rooms) > 2:
            raise ValueError("Door: a door connects at most two rooms")


@dataclass
class Window:
    x: float
    z: float
    width: float = 4.0
    height: float = 5.0
    from_floor: float = 3.0
    room_id: Optional[str] = None
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        _require_finite("Window", x=self.x, z=self.z, from_floor=self.from_floor)
        _require_positive("Window", width=self.width, height=self.height)


@dataclass
class Project:
    name: str
    id: str = field(default_factory=new_id)
    date_created: datetime = field(default_factory=utcnow)
    date_modified: Optional[datetime] = None
    rooms: List[Room] = field(default_factory=list)
    doors: List[Door] = field(default_factory=list)
    windows: List[Window] = field(default_factory=list)

    def __post_init__(self):
        if self.date_modified is None:
            self.date_modified = self.date_created
        if self.date_modified < self.date_created:
            raise ValueError("Project: dateModified is earlier than dateCreated")

    # ---- derived ----
    @property
    def total_area(self) -> float:
        return sum(r.area for r in self.rooms)

    @property
    def room_count(self) -> int:
        return len(self.rooms)

    def bounds(self) -> Tuple[float, float]:
        """Far edges of the plan (max x+width, max z+length); 50×40 when empty."""
        if not self.rooms:
            return DEFAULT_EXTENT_X, DEFAULT_EXTENT_Z
        return (max(r.x + r.width for r in self.rooms),
                max(r.z + r.length for r in self.rooms))

    def touch(self):
        now = utcnow()
        if now <= self.date_modified:
            now = self.date_modified + timedelta(microseconds=1)
        self.date_modified = now

    def copy(self) -> "Project":
        return copy.deepcopy(self)

    # ---- rooms ----
    def room_by_id(self, room_id: str) -> Optional[Room]:
        return next((r for r in self.rooms if r.id == room_id), None)

    def add_room(self, room: Room):
        self.rooms.append(room)
        self.touch()

    def update_room(self, room: Room) -> bool:
        return self._replace(self.rooms, room)

    def delete_room(self, room_id: str):
        self.rooms[:] = [r for r in self.rooms if r.id != room_id]
        self.touch()

    # ---- doors ----
    def door_by_id(self, door_id: str) -> Optional[Door]:
        return next((d for d in self.doors if d.id == door_id), None)

    def add_door(self, door: Door):
        self.doors.append(door)
        self.touch()

    def update_door(self, door: Door) -> bool:
        return self._replace(self.doors, door)

    def delete_door(self, door_id: str):
        self.doors[:] = [d for d in self.doors if d.id != door_id]
        self.touch()

    # ---- windows ----
    def window_by_id(self, window_id: str) -> Optional[Window]:
        return next((w for w in self.windows if w.id == window_id), None)

    def add_window(self, window: Window):
        self.windows.append(window)
        self.touch()

    def update_window(self, window: Window) -> bool:
        return self._replace(self.windows, window)

    def delete_window(self, window_id: str):
        self.windows[:] = [w for w in self.windows if w.id != window_id]
        self.touch()

    def _replace(self, items: list, item) -> bool:
        for i, it in enumerate(items):
            if it.id == item.id:
                items[i] = item
                self.touch()
                return True
        return False


# ===== Edit drafts =====

@dataclass
class RoomDraft:
    name: str = ""
    x: float = 0.0
    z: float = 0.0
    width: float = DEFAULT_ROOM_W
    length: float = DEFAULT_ROOM_L
    height: float = DEFAULT_ROOM_H
    color: Optional[str] = None

    @classmethod
    def from_room(cls, room: Room) -> "RoomDraft":
        return cls(room.name, room.x, room.z, room.width, room.length, room.height, room.color)

    @property
    def area(self) -> float:
        return self.width * self.length

    def validate(self) -> List[str]:
        problems = [f"{k.capitalize()} must be greater than 0"
                    for k, v in (("width", self.width), ("length", self.length), ("height", self.height))
                    if not v > 0]
        if self.color is not None and not is_hex_color(self.color):
            problems.append("Color must be a 6-digit hex value")
        return problems

    def to_room(self, index: int = 0, room_id: Optional[str] = None) -> Room:
        """``index`` is the insertion position, used for the default name and color."""
        problems = self.validate()
        if problems:
            raise ValueError("; ".join(problems))
        return Room(name=self.name.strip() or f"Room {index + 1}",
                    x=float(self.x), z=float(self.z),
                    width=float(self.width), length=float(self.length), height=float(self.height),
                    color=self.color or room_color(index),
                    id=room_id or new_id())


@dataclass
class DoorDraft:
    x: float = 0.0
    z: float = 0.0
    width: float = 3.0
    is_exterior: bool = False
    label: str = ""
    from_room: Optional[str] = None
    to_room: Optional[str] = None

    def validate(self) -> List[str]:
        problems = []
        if not self.width > 0:
            problems.append("Width must be greater than 0")
        if not self.is_exterior and self.from_room and self.from_room == self.to_room:
            problems.append("An interior door must connect two different rooms")
        return problems

    def to_door(self, door_id: Optional[str] = None) -> Door:
        problems = self.validate()
        if problems:
            raise ValueError("; ".join(problems))
        if self.is_exterior:
            rooms = [self.from_room] if self.from_room else []
            label = self.label.strip() or "Door"
        else:
            rooms = [r for r in (self.from_room, self.to_room) if r]
            label = self.label.strip() or None
        return Door(x=float(self.x), z=float(self.z), width=float(self.width),
                    is_exterior=self.is_exterior, label=label, connects_rooms=rooms,
                    id=door_id or new_id())


@dataclass
class WindowDraft:
    x: float = 0.0
    z: float = 0.0
    width: float = 4.0
    height: float = 5.0
    from_floor: float = 3.0
    room_id: Optional[str] = None

    def validate(self) -> List[str]:
        return [f"{k.capitalize()} must be greater than 0"
                for k, v in (("width", self.width), ("height", self.height)) if not v > 0]

    def to_window(self, window_id: Optional[str] = None) -> Window:
        problems = self.validate()
        if problems:
            raise ValueError("; ".join(problems))
        return Window(x=float(self.x), z=float(self.z), width=float(self.width),
                      height=float(self.height), from_floor=float(self.from_floor),
                      room_id=self.room_id, id=window_id or new_id())


# ===== Export formats =====

class ExportFormat(Enum):
    JSON = "JSON"
    PDF = "PDF"
    PNG = "PNG"
    DXF = "DXF"

    @property
    def file_extension(self) -> str:
        return self.value.lower()

    @property
    def mime_type(self) -> str:
        return {
            ExportFormat.JSON: "application/json",
            ExportFormat.PDF: "application/pdf",
            ExportFormat.PNG: "image/png",
            ExportFormat.DXF: "application/dxf",
        }[self]


def export_filename(project: Project, fmt: ExportFormat) -> str:
    stem = re.sub(r"\s+", "-", project.name.strip()) or "floor-plan"
    return f"{stem}.{fmt.file_extension}"
