"""Printable single-page plan: US Letter landscape, 0.5" margins, 72 units per inch."""

from __future__ import annotations
import logging
import math
from datetime import datetime
from typing import Optional

from PySide6.QtCore import QBuffer, QIODevice, QMarginsF
from PySide6.QtGui import QFontMetricsF, QPageLayout, QPageSize, QPainter, QPdfWriter

from .models import Project
from .render import PlanPainter, ensure_gui_app, make_font
from .utils import (PAGE_W, PAGE_H, PAGE_MARGIN, PAGE_HEADER, PAGE_FIT, DEFAULT_EXTENT_X,
                    DEFAULT_EXTENT_Z, DIM_TEXT_COLOR, area_label)

logger = logging.getLogger(__name__)

POINTS_PER_INCH = 72.0
ROOM_LINE = 1.5


def page_scale(project: Project) -> float:
    """Points per foot so the whole plan fits the drawable area with ~15% to spare."""
    max_x, max_z = project.bounds()
    if not (math.isfinite(max_x) and math.isfinite(max_z)):
        raise ValueError("plan extent is not a finite number of feet")
    if max_x <= 0: max_x = DEFAULT_EXTENT_X
    if max_z <= 0: max_z = DEFAULT_EXTENT_Z
    drawing_w = PAGE_W - PAGE_MARGIN * 2
    drawing_h = PAGE_H - PAGE_MARGIN * 2 - PAGE_HEADER
    return min(drawing_w / max_x, drawing_h / max_z) * PAGE_FIT


def scale_note(scale: float) -> str:
    return f'Scale: 1" = {POINTS_PER_INCH / scale:.1f} ft'


def generated_label(when: datetime) -> str:
    return f"Generated: {when:%b} {when.day}, {when.year}"


def draw_page(painter: QPainter, project: Project, generated_at: datetime):
    painter.setRenderHint(QPainter.Antialiasing, True)
    scale = page_scale(project)
    plan = PlanPainter(painter, (PAGE_MARGIN + 20, PAGE_MARGIN + 80), scale)

    plan.centered_text(PAGE_W / 2, PAGE_MARGIN, project.name, make_font(24, bold=True))
    plan.centered_text(PAGE_W / 2, PAGE_MARGIN + 30, generated_label(generated_at),
                       make_font(10), DIM_TEXT_COLOR)

    name_font, dim_font = make_font(10, bold=True), make_font(8)
    for room in project.rooms:
        plan.draw_room(room, ROOM_LINE)
        plan.draw_room_labels(room, name_font, dim_font, (-20, -5, 8))
    plan.draw_openings(project, ROOM_LINE, make_font(7), 6)

    footer_y = PAGE_H - PAGE_MARGIN - 20
    plan.text_at(PAGE_MARGIN, footer_y, f"Total Area: {area_label(project.total_area)}", make_font(12))
    note_font = make_font(10)
    note = scale_note(scale)
    plan.text_at(PAGE_W - PAGE_MARGIN - QFontMetricsF(note_font).horizontalAdvance(note), footer_y,
                 note, note_font, DIM_TEXT_COLOR)


def encode_pdf(project: Project, generated_at: Optional[datetime] = None) -> Optional[bytes]:
    ensure_gui_app()
    buf = QBuffer()
    if not buf.open(QIODevice.WriteOnly):
        logger.warning("PDF export: buffer could not be opened")
        return None
    writer = QPdfWriter(buf)
    writer.setResolution(int(POINTS_PER_INCH))
    writer.setPageLayout(QPageLayout(QPageSize(QPageSize.Letter), QPageLayout.Landscape,
                                     QMarginsF(0, 0, 0, 0)))
    writer.setTitle(project.name)
    writer.setCreator("lidarplan")

    painter = QPainter()
    if not painter.begin(writer):
        logger.warning("PDF export: drawing surface unavailable")
        buf.close()
        return None
    try:
        draw_page(painter, project, generated_at or datetime.now())
    finally:
        painter.end()
    buf.close()
    out = bytes(buf.data())
    return out or None
