from __future__ import annotations
from typing import Optional


class LidarPlanError(Exception):
    """Base class for errors recovered at the session boundary."""


class DecodeError(LidarPlanError, ValueError):
    """Import payload is not valid JSON or is missing required fields."""


class EncodeFailure(LidarPlanError):
    def __init__(self, fmt, message: Optional[str] = None):
        self.fmt = fmt
        name = getattr(fmt, "value", fmt)
        super().__init__(message or f"Could not produce {name} output")


class PersistenceWriteFailure(LidarPlanError):
    def __init__(self, key: str, message: str = ""):
        self.key = key
        super().__init__(message or f"Could not save projects under '{key}'")


class UnsupportedCapture(LidarPlanError):
    """The capture device/environment cannot produce a room scan."""
