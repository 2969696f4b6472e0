from __future__ import annotations
import math, re
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor

# ===== Units =====
METERS_TO_FEET = 3.28084

# ===== Room defaults (feet) =====
DEFAULT_ROOM_W = 12.0
DEFAULT_ROOM_L = 12.0
DEFAULT_ROOM_H = 9.0
MIN_ROOM_SIDE = 4.0
MIN_CEILING = 8.0
MAX_CEILING = 20.0
ROUND_STEP = 0.5
PLACEMENT_GAP = 2.0

# ===== Room colors =====
ROOM_PALETTE = [
    "#e8f4f8", "#f8f4e8", "#f4f8e8", "#e8e8f8", "#f8e8f4",
    "#f8e8e8", "#e8f8e8", "#e8f8f4", "#f4e8f8", "#f8f8e8",
]
_HEX_COLOR = re.compile(r"^#?[0-9a-fA-F]{6}$")

# ===== PDF page (points, 72 per inch) =====
PAGE_W = 792.0
PAGE_H = 612.0
PAGE_MARGIN = 36.0
PAGE_HEADER = 100.0
PAGE_FIT = 0.85
DEFAULT_EXTENT_X = 50.0
DEFAULT_EXTENT_Z = 40.0

# ===== Raster =====
PX_PER_FOOT = 15.0
RASTER_PADDING = 60.0
RASTER_FONT_PX = 14.0

# ===== Drawing colors =====
BG_COLOR = QColor(Qt.white)
GRID_COLOR = QColor(211, 211, 211, 128)
WALL_COLOR = QColor(Qt.black)
DIM_TEXT_COLOR = QColor(Qt.darkGray)
DOOR_COLOR = QColor("#8B4513")
EXT_DOOR_COLOR = QColor("#654321")
WINDOW_COLOR = QColor("#4169E1")
FALLBACK_FILL = QColor(100, 160, 255, 50)


def snap(v: float, step: float) -> float:
    # half away from zero, not banker's rounding
    return math.copysign(math.floor(abs(v) / step + 0.5) * step, v)

def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(v, hi))

def is_hex_color(value) -> bool:
    return isinstance(value, str) and bool(_HEX_COLOR.match(value.strip()))

def room_color(index: int) -> str:
    return ROOM_PALETTE[index % len(ROOM_PALETTE)]

def qcolor_from_hex(value: str) -> QColor:
    v = value.strip()
    c = QColor(v if v.startswith("#") else "#" + v)
    return c if c.isValid() else QColor(FALLBACK_FILL)

def dimensions_label(width: float, length: float) -> str:
    return f"{int(width)}' × {int(length)}'"

def area_label(area: float) -> str:
    return f"{int(area)} sq ft"
