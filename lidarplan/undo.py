from __future__ import annotations
from typing import Optional, Callable, List, Tuple

from .config import HISTORY_LIMIT


class HistoryManager:
    """Linear undo/redo over serialized project snapshots.

    ``record`` drops anything after the cursor, so a new edit discards the
    redo tail. Only the most recent ``limit`` snapshots are kept.
    """

    def __init__(self, limit: int = HISTORY_LIMIT, on_change: Optional[Callable[[], None]] = None):
        if limit < 1:
            raise ValueError("history limit must be at least 1")
        self.limit = limit
        self.on_change = on_change
        self._snapshots: List[str] = []
        self._cursor = -1

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def snapshots(self) -> Tuple[str, ...]:
        return tuple(self._snapshots)

    def record(self, snapshot: str):
        del self._snapshots[self._cursor + 1:]
        self._snapshots.append(snapshot)
        overflow = len(self._snapshots) - self.limit
        if overflow > 0:
            del self._snapshots[:overflow]
        self._cursor = len(self._snapshots) - 1
        self._changed()

    def reset(self, snapshot: str):
        self._snapshots = [snapshot]
        self._cursor = 0
        self._changed()

    def clear(self):
        self._snapshots = []
        self._cursor = -1
        self._changed()

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._snapshots) - 1

    def undo(self) -> Optional[str]:
        if not self.can_undo():
            return None
        self._cursor -= 1
        self._changed()
        return self._snapshots[self._cursor]

    def redo(self) -> Optional[str]:
        if not self.can_redo():
            return None
        self._cursor += 1
        self._changed()
        return self._snapshots[self._cursor]

    def current(self) -> Optional[str]:
        return self._snapshots[self._cursor] if self._snapshots else None

    def _changed(self):
        if self.on_change: self.on_change()
