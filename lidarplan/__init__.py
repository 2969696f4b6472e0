from .errors import LidarPlanError, DecodeError, EncodeFailure, PersistenceWriteFailure, UnsupportedCapture
from .models import (Room, Door, Window, Project, RoomDraft, DoorDraft, WindowDraft,
                     ExportFormat, export_filename)
from .capture import (CapturedSurface, CapturedRoom, CaptureSource, ScanResult,
                      convert_room, next_room_position)
from .state import encode_project, decode_project, encode_project_list, decode_project_list
from .undo import HistoryManager
from .export import export_project, write_export, export_in_background
from .store import ProjectStore
from .session import EditorSession

__all__ = [
    "LidarPlanError", "DecodeError", "EncodeFailure", "PersistenceWriteFailure", "UnsupportedCapture",
    "Room", "Door", "Window", "Project", "RoomDraft", "DoorDraft", "WindowDraft",
    "ExportFormat", "export_filename",
    "CapturedSurface", "CapturedRoom", "CaptureSource", "ScanResult", "convert_room", "next_room_position",
    "encode_project", "decode_project", "encode_project_list", "decode_project_list",
    "HistoryManager", "export_project", "write_export", "export_in_background",
    "ProjectStore", "EditorSession",
]
