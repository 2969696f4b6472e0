from __future__ import annotations
import logging
from typing import Optional

from PySide6.QtCore import QBuffer, QIODevice
from PySide6.QtGui import QImage, QPainter

from .config import PNG_SCALE
from .models import Project
from .render import PlanPainter, ensure_gui_app, make_font
from .utils import PX_PER_FOOT, RASTER_PADDING, RASTER_FONT_PX, BG_COLOR

logger = logging.getLogger(__name__)


def image_size(project: Project, scale: float = PNG_SCALE):
    ppf = PX_PER_FOOT * scale
    pad = RASTER_PADDING * scale
    max_x, max_z = project.bounds()
    return round(max_x * ppf + pad * 2), round(max_z * ppf + pad * 2)


def render_image(project: Project, scale: float = PNG_SCALE) -> Optional[QImage]:
    """Plan on a 1-ft grid, rooms filled with their own color; ``scale`` is the device multiplier."""
    if scale <= 0:
        raise ValueError("scale must be positive")
    ensure_gui_app()
    ppf = PX_PER_FOOT * scale
    pad = RASTER_PADDING * scale
    w, h = image_size(project, scale)
    img = QImage(w, h, QImage.Format_ARGB32)
    if img.isNull():
        logger.warning("PNG export: could not allocate %dx%d image", w, h)
        return None
    img.fill(BG_COLOR)

    painter = QPainter()
    if not painter.begin(img):
        logger.warning("PNG export: drawing surface unavailable")
        return None
    try:
        painter.setRenderHint(QPainter.Antialiasing, True)
        plan = PlanPainter(painter, (pad, pad), ppf)
        plan.draw_grid(*project.bounds())

        fs = RASTER_FONT_PX * scale
        name_font = make_font(fs, bold=True, pixels=True)
        dim_font = make_font(fs * 0.8, pixels=True)
        for room in project.rooms:
            plan.draw_room(room, 2 * scale, fill=True)
            plan.draw_room_labels(room, name_font, dim_font, (-fs * 2, 0, fs))
        plan.draw_openings(project, scale, make_font(fs * 0.7, pixels=True), 10 * scale)
    finally:
        painter.end()
    return img


def encode_png(project: Project, scale: float = PNG_SCALE) -> Optional[bytes]:
    img = render_image(project, scale)
    if img is None:
        return None
    buf = QBuffer()
    buf.open(QIODevice.WriteOnly)
    ok = img.save(buf, "PNG")
    buf.close()
    if not ok:
        logger.warning("PNG export: encoding failed")
        return None
    return bytes(buf.data())
