"""Shared QPainter drawing for the page (PDF) and raster (PNG) encoders.

Both encoders draw the same plan: room rectangles with three centered labels
(name, dimensions, area) plus doors and windows as straight segments. A door
is a segment of its width centered on (x, z) running along z; a window runs
along x. Exterior doors also get their label.
"""

from __future__ import annotations
import os, sys
from typing import Optional, Tuple

from PySide6.QtCore import Qt, QPointF, QRectF, QLineF
from PySide6.QtGui import QBrush, QFont, QFontMetricsF, QGuiApplication, QPainter, QPen

from .models import Project, Room
from .utils import (WALL_COLOR, DIM_TEXT_COLOR, DOOR_COLOR, EXT_DOOR_COLOR, WINDOW_COLOR,
                    GRID_COLOR, qcolor_from_hex, dimensions_label, area_label)

_app: Optional[QGuiApplication] = None


def ensure_gui_app():
    """Fonts need a QGuiApplication; make a headless one if nothing is running."""
    global _app
    app = QGuiApplication.instance()
    if app is not None:
        return app
    if sys.platform.startswith("linux") and not (os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY")):
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    _app = QGuiApplication(sys.argv[:1] or ["lidarplan"])
    return _app


def make_font(size: float, bold: bool = False, pixels: bool = False) -> QFont:
    f = QFont()
    if pixels:
        f.setPixelSize(max(1, round(size)))
    else:
        f.setPointSizeF(size)
    f.setBold(bold)
    return f


class PlanPainter:
    """Maps plan feet to device units: ``origin + (x, z) * scale``."""

    def __init__(self, painter: QPainter, origin: Tuple[float, float], scale: float):
        self.p = painter
        self.ox, self.oy = origin
        self.scale = scale

    def point(self, x: float, z: float) -> QPointF:
        return QPointF(self.ox + x * self.scale, self.oy + z * self.scale)

    def room_rect(self, room: Room) -> QRectF:
        return QRectF(self.point(room.x, room.z),
                      QPointF(self.ox + (room.x + room.width) * self.scale,
                              self.oy + (room.z + room.length) * self.scale))

    # ----- text -----
    def text_at(self, x: float, y: float, text: str, font: QFont, color=WALL_COLOR):
        """Draw with (x, y) as the top-left corner of the text box."""
        self.p.setFont(font)
        self.p.setPen(color)
        self.p.drawText(QPointF(x, y + QFontMetricsF(font).ascent()), text)

    def centered_text(self, cx: float, y: float, text: str, font: QFont, color=WALL_COLOR):
        w = QFontMetricsF(font).horizontalAdvance(text)
        self.text_at(cx - w / 2, y, text, font, color)

    # ----- plan -----
    def draw_grid(self, extent_x: float, extent_z: float, width: float = 0.5):
        """One line per foot over the plan extent."""
        self.p.setPen(QPen(GRID_COLOR, width))
        right = self.ox + extent_x * self.scale
        bottom = self.oy + extent_z * self.scale
        x = self.ox
        while x <= right + 1e-6:
            self.p.drawLine(QLineF(x, self.oy, x, bottom))
            x += self.scale
        y = self.oy
        while y <= bottom + 1e-6:
            self.p.drawLine(QLineF(self.ox, y, right, y))
            y += self.scale

    def draw_room(self, room: Room, border: float, fill: bool = False):
        r = self.room_rect(room)
        if fill:
            self.p.fillRect(r, QBrush(qcolor_from_hex(room.color)))
        self.p.setPen(QPen(WALL_COLOR, border))
        self.p.setBrush(Qt.NoBrush)
        self.p.drawRect(r)

    def draw_room_labels(self, room: Room, name_font: QFont, dim_font: QFont,
                         offsets: Tuple[float, float, float]):
        """``offsets`` are the top of the name/dimensions/area lines relative to the room center."""
        r = self.room_rect(room)
        cx, cy = r.center().x(), r.center().y()
        self.centered_text(cx, cy + offsets[0], room.name, name_font)
        self.centered_text(cx, cy + offsets[1], dimensions_label(room.width, room.length), dim_font, DIM_TEXT_COLOR)
        self.centered_text(cx, cy + offsets[2], area_label(room.area), dim_font, DIM_TEXT_COLOR)

    def draw_openings(self, project: Project, line: float, label_font: QFont, label_gap: float):
        for d in project.doors:
            color = EXT_DOOR_COLOR if d.is_exterior else DOOR_COLOR
            self.p.setPen(QPen(color, line * 2, Qt.SolidLine, Qt.FlatCap))
            self.p.drawLine(QLineF(self.point(d.x, d.z - d.width / 2), self.point(d.x, d.z + d.width / 2)))
            if d.is_exterior and d.label:
                pt = self.point(d.x, d.z)
                self.text_at(pt.x() + label_gap, pt.y() - QFontMetricsF(label_font).height() / 2,
                             d.label, label_font, EXT_DOOR_COLOR)
        self.p.setPen(QPen(WINDOW_COLOR, line * 3, Qt.SolidLine, Qt.FlatCap))
        for w in project.windows:
            self.p.drawLine(QLineF(self.point(w.x - w.width / 2, w.z), self.point(w.x + w.width / 2, w.z)))
