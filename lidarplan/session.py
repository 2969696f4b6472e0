"""Editing session: the one object the UI layer talks to.

It owns the current project, the undo history and a single export worker.
Every mutation follows the same path: change the model, persist through the
store, record a history snapshot and emit ``changed``. Decode, encode and
capture errors stop here: they are logged and turned into a ``notification``.
"""

from __future__ import annotations
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Union

from PySide6.QtCore import QObject, Signal

from .capture import CaptureSource, CapturedRoom, ScanResult, ensure_capture_supported, next_room_position
from .config import EXPORT_DIR
from .errors import DecodeError, EncodeFailure, UnsupportedCapture
from .export import export_in_background, export_project, write_export
from .models import Door, DoorDraft, ExportFormat, Project, Room, RoomDraft, Window, WindowDraft
from .render import ensure_gui_app
from .state import decode_project, dump_project
from .store import ProjectStore
from .undo import HistoryManager

logger = logging.getLogger(__name__)


class EditorSession(QObject):
    changed = Signal()
    historyChanged = Signal()
    notification = Signal(str)

    def __init__(self, store: ProjectStore, history: Optional[HistoryManager] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.store = store
        self.history = history or HistoryManager()
        self._history_callback = self.history.on_change
        self.history.on_change = self._history_changed
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="lidarplan-export")
        self.project: Optional[Project] = None
        store.currentChanged.connect(self._store_current_changed)
        if store.current is not None:
            self._activate(store.current)

    def close(self):
        self._executor.shutdown(wait=True)

    # ----- helpers -----
    def _activate(self, project: Optional[Project]):
        self.project = project
        if project is None:
            self.history.clear()
        else:
            self.history.reset(dump_project(project))
        self.changed.emit()

    def _history_changed(self):
        if self._history_callback: self._history_callback()
        self.historyChanged.emit()

    def _store_current_changed(self, project):
        # the open project was deleted from the store behind our back
        if project is None and self.project is not None and self.store.get(self.project.id) is None:
            self._activate(None)

    def _require_project(self) -> Project:
        if self.project is None:
            raise RuntimeError("No project is open")
        return self.project

    def _commit(self, what: str):
        project = self._require_project()
        if not self.store.update_project(project):
            logger.warning("Project %s is no longer in the store; edit not persisted", project.id)
        self.history.record(dump_project(project))
        logger.debug("%s (%s)", what, project.name)
        self.changed.emit()

    def _notify(self, message: str):
        logger.warning(message)
        self.notification.emit(message)

    # ----- projects -----
    def new_project(self, name: str) -> Project:
        project = self.store.create_project(name.strip() or "Untitled")
        self._activate(project)
        return project

    def open_project(self, project_id: str) -> Optional[Project]:
        project = self.store.select(project_id)
        if project is None:
            self._notify(f"Project {project_id} was not found")
            return None
        self._activate(project)
        return project

    def close_project(self):
        self.store.select(None)
        self._activate(None)

    def delete_project(self, project_id: str) -> bool:
        if not self.store.delete_project(project_id):
            return False
        if self.project is not None and self.project.id == project_id:
            self._activate(None)
        return True

    # ----- rooms -----
    def add_room(self, room: Union[Room, RoomDraft]) -> Room:
        project = self._require_project()
        if isinstance(room, RoomDraft):
            room = room.to_room(index=project.room_count)
        project.add_room(room)
        self._commit(f"Added room {room.name}")
        return room

    def update_room(self, room: Room) -> bool:
        if not self._require_project().update_room(room):
            return False
        self._commit(f"Updated room {room.name}")
        return True

    def delete_room(self, room_id: str):
        self._require_project().delete_room(room_id)
        self._commit(f"Deleted room {room_id}")

    # ----- doors & windows -----
    def add_door(self, door: Union[Door, DoorDraft]) -> Door:
        if isinstance(door, DoorDraft):
            door = door.to_door()
        self._require_project().add_door(door)
        self._commit("Added door")
        return door

    def update_door(self, door: Door) -> bool:
        if not self._require_project().update_door(door):
            return False
        self._commit("Updated door")
        return True

    def delete_door(self, door_id: str):
        self._require_project().delete_door(door_id)
        self._commit("Deleted door")

    def add_window(self, window: Union[Window, WindowDraft]) -> Window:
        if isinstance(window, WindowDraft):
            window = window.to_window()
        self._require_project().add_window(window)
        self._commit("Added window")
        return window

    def update_window(self, window: Window) -> bool:
        if not self._require_project().update_window(window):
            return False
        self._commit("Updated window")
        return True

    def delete_window(self, window_id: str):
        self._require_project().delete_window(window_id)
        self._commit("Deleted window")

    # ----- capture -----
    def check_capture(self, source: CaptureSource) -> bool:
        try:
            ensure_capture_supported(source)
        except UnsupportedCapture as e:
            self._notify(str(e))
            return False
        return True

    def add_scanned_room(self, captured: Union[CapturedRoom, CaptureSource], name: Optional[str] = None,
                         exterior_doors: bool = False) -> Optional[Room]:
        """Convert one capture and append it to the right of the existing rooms."""
        project = self._require_project()
        if isinstance(captured, CaptureSource):
            if not self.check_capture(captured):
                return None
            captured = captured.capture()
        index = project.room_count
        scan = ScanResult.from_capture(captured, name or f"Room {index + 1}", index, exterior_doors)
        scan = scan.placed_at(*next_room_position(project))
        room = scan.room
        project.rooms.append(room)
        for d in scan.doors:
            d.connects_rooms = [room.id]
            project.doors.append(d)
        for w in scan.windows:
            w.room_id = room.id
            project.windows.append(w)
        project.touch()
        self._commit(f"Scanned room {room.name} ({room.width:g} x {room.length:g} ft)")
        return room

    # ----- history -----
    def _restore(self, snapshot: Optional[str]) -> bool:
        if snapshot is None:
            return False
        project = decode_project(snapshot)
        self.project = project
        self.store.update_project(project)
        self.changed.emit()
        return True

    def undo(self) -> bool:
        return self._restore(self.history.undo())

    def redo(self) -> bool:
        return self._restore(self.history.redo())

    # ----- import / export -----
    def import_json(self, data: Union[bytes, str]) -> Optional[Project]:
        try:
            project = decode_project(data)
        except DecodeError as e:
            self._notify(f"Import failed: {e}")
            return None
        self.store.add_or_replace(project)
        self.store.select(project.id)
        self._activate(project)
        logger.info("Imported project %s with %d rooms", project.name, project.room_count)
        return project

    def _export_target(self) -> Optional[Project]:
        if self.project is None:
            self._notify("Nothing to export: no project is open")
        return self.project

    def export(self, fmt: ExportFormat, **options) -> Optional[bytes]:
        project = self._export_target()
        if project is None:
            return None
        try:
            return export_project(project, fmt, **options)
        except EncodeFailure as e:
            self._notify(str(e))
            return None

    def export_to(self, fmt: ExportFormat, directory: Union[str, Path, None] = None,
                  **options) -> Optional[Path]:
        project = self._export_target()
        if project is None:
            return None
        try:
            return write_export(project, fmt, directory or EXPORT_DIR, **options)
        except EncodeFailure as e:
            self._notify(str(e))
            return None
        except OSError as e:
            self._notify(f"Could not write export: {e}")
            return None

    def export_in_background(self, fmt: ExportFormat, **options) -> Optional[Future]:
        """The Future raises EncodeFailure on a failed encode; callers report it."""
        project = self._export_target()
        if project is None:
            return None
        if fmt in (ExportFormat.PDF, ExportFormat.PNG):
            ensure_gui_app()
        return export_in_background(project, fmt, self._executor, **options)
