"""Runtime configuration via environment variables."""

from __future__ import annotations
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from PySide6.QtCore import QSettings

load_dotenv()

# Persisted project list
SETTINGS_ORG = os.getenv("LIDARPLAN_SETTINGS_ORG", "LiDARScanner")
SETTINGS_APP = os.getenv("LIDARPLAN_SETTINGS_APP", "FloorPlans")
SETTINGS_PATH = os.getenv("LIDARPLAN_SETTINGS_PATH", "")
SAVE_KEY = "SavedProjects"

# Exports
EXPORT_DIR = Path(os.getenv("LIDARPLAN_EXPORT_DIR", "exports"))
PNG_SCALE = float(os.getenv("LIDARPLAN_PNG_SCALE", "2.0"))

# Editing
HISTORY_LIMIT = int(os.getenv("LIDARPLAN_HISTORY_LIMIT", "50"))

# Logging
LOG_LEVEL = os.getenv("LIDARPLAN_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)


def open_settings(path: str | os.PathLike | None = None) -> QSettings:
    """Key-value store for the project list: an INI file if a path is given
    (or configured), the platform's native per-user store otherwise."""
    path = path or SETTINGS_PATH
    if path:
        return QSettings(str(path), QSettings.IniFormat)
    return QSettings(SETTINGS_ORG, SETTINGS_APP)
