"""Bounded linear undo/redo over immutable state snapshots."""
from __future__ import annotations

from typing import List

from .errors import NoOpError, ValidationError
from .models import SeatingState

HISTORY_LIMIT = 50


class History:
    """Snapshot sequence with a cursor.

    Snapshots before the cursor are undo targets. While the caller sits at
    the newest state the cursor equals ``len(snapshots)``; the first undo
    stores that live state at the end so a redo can return to it.

    ``limit`` bounds the number of undo steps. When a checkpoint pushes past
    it the oldest snapshot is evicted and the cursor stays put relative to
    the newest end.
    """

    def __init__(self, limit: int = HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValidationError("History limit must be at least 1")
        self.limit = limit
        self._snapshots: List[SeatingState] = []
        self._cursor = 0

    @property
    def undo_depth(self) -> int:
        return self._cursor

    @property
    def redo_depth(self) -> int:
        return max(0, len(self._snapshots) - 1 - self._cursor)

    @property
    def can_undo(self) -> bool:
        return self.undo_depth > 0

    @property
    def can_redo(self) -> bool:
        return self.redo_depth > 0

    def checkpoint(self, state: SeatingState) -> None:
        """Record the pre-mutation ``state`` and drop any redo future."""
        del self._snapshots[self._cursor:]
        self._snapshots.append(state)
        while len(self._snapshots) > self.limit:
            self._snapshots.pop(0)
        self._cursor = len(self._snapshots)

    def undo(self, current: SeatingState) -> SeatingState:
        if not self.can_undo:
            raise NoOpError("Nothing to undo")
        if self._cursor == len(self._snapshots):
            self._snapshots.append(current)
        self._cursor -= 1
        return self._snapshots[self._cursor]

    def redo(self) -> SeatingState:
        if not self.can_redo:
            raise NoOpError("Nothing to redo")
        self._cursor += 1
        return self._snapshots[self._cursor]

    def clear(self) -> None:
        self._snapshots = []
        self._cursor = 0
