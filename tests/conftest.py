import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QSettings

from lidarplan.models import Door, Project, Room, Window
from lidarplan.render import ensure_gui_app
from lidarplan.store import ProjectStore


@pytest.fixture(scope="session", autouse=True)
def qapp():
    return ensure_gui_app()


@pytest.fixture
def settings(tmp_path_factory):
    return QSettings(str(tmp_path_factory.mktemp("settings") / "projects.ini"), QSettings.IniFormat)


@pytest.fixture
def store(settings):
    return ProjectStore(settings)


@pytest.fixture
def sample_project():
    """Five-room first floor with interior doors, a front entry and four windows."""
    rooms = [
        Room("Living Room", 0, 0, 18, 24, 9, "#e8f4f8", id="living-room"),
        Room("Kitchen", 18, 0, 14, 12, 9, "#f8f4e8", id="kitchen"),
        Room("Dining Room", 18, 12, 14, 12, 9, "#f4f8e8", id="dining"),
        Room("Bathroom", 32, 0, 8, 10, 9, "#e8e8f8", id="bathroom"),
        Room("Master Bedroom", 32, 10, 14, 14, 9, "#f8e8f4", id="bedroom"),
    ]
    doors = [
        Door(18, 6, 3, connects_rooms=["living-room", "kitchen"]),
        Door(22, 12, 4, connects_rooms=["kitchen", "dining"]),
        Door(32, 18, 3, connects_rooms=["dining", "bedroom"]),
        Door(32, 10, 2.5, connects_rooms=["bathroom", "bedroom"]),
        Door(0, 10, 6, is_exterior=True, label="Front Entry", connects_rooms=["living-room"]),
    ]
    windows = [
        Window(3, 0, 4, room_id="living-room"),
        Window(11, 0, 4, room_id="living-room"),
        Window(22, 0, 5, room_id="kitchen"),
        Window(46, 15, 6, room_id="bedroom"),
    ]
    return Project("First Floor Scan", rooms=rooms, doors=doors, windows=windows)
