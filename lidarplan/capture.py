"""Conversion of captured-room snapshots (meters) into plan entities (feet).

The capture collaborator reports walls, doors and windows as surfaces with a
4x4 column-major transform (translation in column 3) and physical dimensions.
Only their bounding extents are used; orientation is ignored, so a room comes
out as the axis-aligned box around every wall.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from .errors import UnsupportedCapture
from .models import Door, Project, Room, Window
from .utils import (METERS_TO_FEET, DEFAULT_ROOM_W, DEFAULT_ROOM_L, DEFAULT_ROOM_H,
                    MIN_ROOM_SIDE, MIN_CEILING, MAX_CEILING, ROUND_STEP, PLACEMENT_GAP,
                    snap, clamp, room_color)

Vec3 = Tuple[float, float, float]


def _identity_at(position: Sequence[float]) -> List[List[float]]:
    x, y, z = position
    return [[1.0, 0.0, 0.0, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [float(x), float(y), float(z), 1.0]]


@dataclass(frozen=True)
class CapturedSurface:
    transform: Tuple[Tuple[float, ...], ...]   # 4 columns of 4
    dimensions: Vec3

    @classmethod
    def at(cls, position: Sequence[float], dimensions: Sequence[float]) -> "CapturedSurface":
        return cls(tuple(tuple(c) for c in _identity_at(position)),
                   tuple(float(d) for d in dimensions))

    @classmethod
    def from_dict(cls, data: Dict) -> "CapturedSurface":
        t = data.get("transform")
        dims = data.get("dimensions")
        if not isinstance(dims, (list, tuple)) or len(dims) != 3:
            raise ValueError("captured surface needs 3 dimensions")
        if isinstance(t, (list, tuple)) and len(t) == 16:
            cols = tuple(tuple(float(v) for v in t[i:i + 4]) for i in range(0, 16, 4))
        elif isinstance(t, (list, tuple)) and len(t) == 4:
            cols = tuple(tuple(float(v) for v in c) for c in t)
        elif "position" in data:
            return cls.at(data["position"], dims)
        else:
            raise ValueError("captured surface needs a transform or a position")
        return cls(cols, tuple(float(d) for d in dims))

    @property
    def position(self) -> Vec3:
        col = self.transform[3]
        return col[0], col[1], col[2]


@dataclass(frozen=True)
class CapturedRoom:
    walls: Tuple[CapturedSurface, ...] = ()
    doors: Tuple[CapturedSurface, ...] = ()
    windows: Tuple[CapturedSurface, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict) -> "CapturedRoom":
        def _surfaces(key):
            return tuple(CapturedSurface.from_dict(s) for s in data.get(key) or [])
        return cls(_surfaces("walls"), _surfaces("doors"), _surfaces("windows"))


@runtime_checkable
class CaptureSource(Protocol):
    def is_supported(self) -> bool: ...
    def capture(self) -> "CapturedRoom": ...


def ensure_capture_supported(source: CaptureSource):
    if not source.is_supported():
        raise UnsupportedCapture("This device cannot capture room scans.")


# ===== Bounding box =====

def wall_extents(walls: Sequence[CapturedSurface]) -> Optional[Tuple[float, float, float, float, float]]:
    """(min_x, max_x, min_z, max_z, max_height) in meters, or None without walls."""
    if not walls:
        return None
    min_x = min_z = math.inf
    max_x = max_z = -math.inf
    max_h = 0.0
    for wall in walls:
        px, _, pz = wall.position
        dx, dy, dz = wall.dimensions
        min_x = min(min_x, px - dx / 2); max_x = max(max_x, px + dx / 2)
        min_z = min(min_z, pz - dz / 2); max_z = max(max_z, pz + dz / 2)
        max_h = max(max_h, dy)
    return min_x, max_x, min_z, max_z, max_h


def convert_room(captured: CapturedRoom, name: str, index: int = 0) -> Room:
    ext = wall_extents(captured.walls)
    if ext is None:
        return Room(name=name, x=0.0, z=0.0, width=DEFAULT_ROOM_W, length=DEFAULT_ROOM_L,
                    height=DEFAULT_ROOM_H, color=room_color(index))
    min_x, max_x, min_z, max_z, max_h = ext
    width = (max_x - min_x) * METERS_TO_FEET
    length = (max_z - min_z) * METERS_TO_FEET
    height = max_h * METERS_TO_FEET
    return Room(
        name=name, x=0.0, z=0.0,
        width=max(MIN_ROOM_SIDE, snap(width, ROUND_STEP)),
        length=max(MIN_ROOM_SIDE, snap(length, ROUND_STEP)),
        height=clamp(snap(height, ROUND_STEP), MIN_CEILING, MAX_CEILING),
        color=room_color(index),
    )


def extract_doors(captured: CapturedRoom, exterior: bool = False) -> List[Door]:
    doors = []
    for d in captured.doors:
        px, _, pz = d.position
        doors.append(Door(x=px * METERS_TO_FEET, z=pz * METERS_TO_FEET,
                          width=d.dimensions[0] * METERS_TO_FEET, is_exterior=exterior))
    return doors


def extract_windows(captured: CapturedRoom) -> List[Window]:
    windows = []
    for w in captured.windows:
        px, py, pz = w.position
        dx, dy, _ = w.dimensions
        windows.append(Window(x=px * METERS_TO_FEET, z=pz * METERS_TO_FEET,
                              width=dx * METERS_TO_FEET, height=dy * METERS_TO_FEET,
                              from_floor=(py - dy / 2) * METERS_TO_FEET))
    return windows


# ===== Placement =====

def next_room_position(project: Project) -> Tuple[float, float]:
    if not project.rooms:
        return 0.0, 0.0
    return max(r.x + r.width for r in project.rooms) + PLACEMENT_GAP, 0.0


@dataclass
class ScanResult:
    room: Room
    doors: List[Door] = field(default_factory=list)
    windows: List[Window] = field(default_factory=list)
    origin: Tuple[float, float] = (0.0, 0.0)   # bbox min corner in feet, capture frame

    @classmethod
    def from_capture(cls, captured: CapturedRoom, name: str, index: int = 0,
                     exterior_doors: bool = False) -> "ScanResult":
        ext = wall_extents(captured.walls)
        origin = (ext[0] * METERS_TO_FEET, ext[2] * METERS_TO_FEET) if ext else (0.0, 0.0)
        return cls(room=convert_room(captured, name, index),
                   doors=extract_doors(captured, exterior_doors),
                   windows=extract_windows(captured),
                   origin=origin)

    def placed_at(self, x: float, z: float) -> "ScanResult":
        """Move the room to (x, z), carrying doors/windows along with it."""
        dx, dz = x - self.origin[0], z - self.origin[1]
        return ScanResult(
            room=replace(self.room, x=x, z=z),
            doors=[replace(d, x=d.x + dx, z=d.z + dz, connects_rooms=list(d.connects_rooms))
                   for d in self.doors],
            windows=[replace(w, x=w.x + dx, z=w.z + dz) for w in self.windows],
            origin=(x, z),
        )
