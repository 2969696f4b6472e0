"""AutoCAD R2000 drawing of the plan, one drawing unit per foot."""

from __future__ import annotations
import io
import logging
from typing import Optional

import ezdxf
from ezdxf import units
from ezdxf.enums import TextEntityAlignment

from .models import Project, Room

logger = logging.getLogger(__name__)

DXF_VERSION = "R2000"
TEXT_HEIGHT = 1.0

# name -> ACI color
LAYERS = {"WALLS": 1, "DOORS": 2, "WINDOWS": 3, "DIMENSIONS": 4, "TEXT": 5}


def new_document():
    doc = ezdxf.new(DXF_VERSION)
    doc.units = units.FT
    for name, color in LAYERS.items():
        doc.layers.add(name, color=color, linetype="CONTINUOUS")
    return doc


def add_room(msp, room: Room):
    x1, y1 = room.x, room.z
    x2, y2 = room.x + room.width, room.z + room.length
    walls = {"layer": "WALLS"}
    # bottom, right, top, left
    msp.add_line((x1, y1, 0), (x2, y1, 0), dxfattribs=walls)
    msp.add_line((x2, y1, 0), (x2, y2, 0), dxfattribs=walls)
    msp.add_line((x2, y2, 0), (x1, y2, 0), dxfattribs=walls)
    msp.add_line((x1, y2, 0), (x1, y1, 0), dxfattribs=walls)

    cx, cy = room.center
    msp.add_text(room.name, height=TEXT_HEIGHT, dxfattribs={"layer": "TEXT"}).set_placement(
        (cx, cy), align=TextEntityAlignment.MIDDLE_CENTER)


def build_document(project: Project):
    doc = new_document()
    msp = doc.modelspace()
    for room in project.rooms:
        add_room(msp, room)
    for d in project.doors:
        msp.add_line((d.x, d.z - d.width / 2, 0), (d.x, d.z + d.width / 2, 0), dxfattribs={"layer": "DOORS"})
    for w in project.windows:
        msp.add_line((w.x - w.width / 2, w.z, 0), (w.x + w.width / 2, w.z, 0), dxfattribs={"layer": "WINDOWS"})
    return doc


def encode_dxf(project: Project) -> Optional[bytes]:
    doc = build_document(project)
    stream = io.StringIO()
    doc.write(stream)
    text = stream.getvalue()
    if not text:
        logger.warning("DXF export: writer produced no output")
        return None
    return doc.encode(text)
