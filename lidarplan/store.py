"""Persisted list of projects, kept as one JSON array under a single settings key."""

from __future__ import annotations
import logging
from typing import List, Optional

from PySide6.QtCore import QByteArray, QObject, QSettings, Signal

from .config import SAVE_KEY
from .errors import DecodeError, PersistenceWriteFailure
from .models import Project
from .state import decode_project_list, encode_project_list

logger = logging.getLogger(__name__)


class ProjectStore(QObject):
    projectsChanged = Signal()
    currentChanged = Signal(object)  # Project or None
    saveFailed = Signal(str)

    def __init__(self, settings: QSettings, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.settings = settings
        self._projects: List[Project] = []
        self._current: Optional[Project] = None
        self.load()

    @property
    def projects(self) -> List[Project]:
        return list(self._projects)

    @property
    def current(self) -> Optional[Project]:
        return self._current

    def _index(self, project_id: str) -> int:
        for i, p in enumerate(self._projects):
            if p.id == project_id:
                return i
        return -1

    def get(self, project_id: str) -> Optional[Project]:
        i = self._index(project_id)
        return self._projects[i] if i >= 0 else None

    def _set_current(self, project: Optional[Project]):
        self._current = project
        self.currentChanged.emit(project)

    # ----- mutations -----
    def create_project(self, name: str) -> Project:
        project = Project(name=name)
        self._projects.append(project)
        self._set_current(project)
        self._commit()
        return project

    def update_project(self, project: Project) -> bool:
        i = self._index(project.id)
        if i < 0:
            return False
        self._projects[i] = project
        if self._current is not None and self._current.id == project.id:
            self._set_current(project)
        self._commit()
        return True

    def add_or_replace(self, project: Project):
        if not self.update_project(project):
            self._projects.append(project)
            self._commit()

    def delete_project(self, project_id: str) -> bool:
        i = self._index(project_id)
        if i < 0:
            return False
        del self._projects[i]
        if self._current is not None and self._current.id == project_id:
            self._set_current(None)
        self._commit()
        return True

    def select(self, project_id: Optional[str]) -> Optional[Project]:
        project = self.get(project_id) if project_id else None
        self._set_current(project)
        return project

    def _commit(self):
        self.projectsChanged.emit()
        self.save()

    # ----- persistence -----
    def _write(self):
        payload = encode_project_list(self._projects).encode("utf-8")
        self.settings.setValue(SAVE_KEY, QByteArray(payload))
        self.settings.sync()
        if self.settings.status() != QSettings.NoError:
            raise PersistenceWriteFailure(SAVE_KEY)

    def save(self) -> bool:
        """Best effort: a failed write is logged and reported via ``saveFailed``, never raised."""
        try:
            self._write()
        except PersistenceWriteFailure as e:
            logger.warning("Saving projects failed: %s", e)
            self.saveFailed.emit(str(e))
            return False
        return True

    def load(self) -> List[Project]:
        raw = self.settings.value(SAVE_KEY)
        if isinstance(raw, QByteArray):
            raw = bytes(raw.data())
        try:
            self._projects = decode_project_list(raw) if isinstance(raw, (bytes, str)) else []
        except DecodeError as e:
            logger.warning("Stored projects under '%s' are unreadable, starting empty: %s", SAVE_KEY, e)
            self._projects = []
        if self._current is not None:
            self._current = self.get(self._current.id)
        self.projectsChanged.emit()
        return self.projects
