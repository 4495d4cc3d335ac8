"""
Undo/redo history around calendar mutations.

Every accepted mutation pushes a full copy of the current calendar onto the
undo stack, clears the redo stack and persists the new calendar. Stacks only
live for the session; only the current calendar is persisted.
"""
import copy
import threading
from typing import Callable, List, Optional

from fieldmemo.config_manager import config
from fieldmemo.logger import get_logger
from fieldmemo.models import CalendarData
from fieldmemo.persistence import DurableStore

logger = get_logger("history")


class HistoryManager:
    """Linear undo/redo over snapshots of CalendarData.

    One re-entrant lock covers (current, undo stack, redo stack) and the
    persist step, so operations from different threads are linearized.
    """

    def __init__(self, store: DurableStore, limit: Optional[int] = None):
        self._store = store
        self._limit = limit if limit is not None else config.HISTORY_LIMIT
        self._lock = threading.RLock()
        self._undo: List[CalendarData] = []
        self._redo: List[CalendarData] = []
        self._current: CalendarData = store.load()

    @property
    def current(self) -> CalendarData:
        """Copy of the present calendar."""
        with self._lock:
            return copy.deepcopy(self._current)

    @property
    def undo_depth(self) -> int:
        with self._lock:
            return len(self._undo)

    @property
    def redo_depth(self) -> int:
        with self._lock:
            return len(self._redo)

    def can_undo(self) -> bool:
        return self.undo_depth > 0

    def can_redo(self) -> bool:
        return self.redo_depth > 0

    def mutate(self, new_store: CalendarData) -> None:
        with self._lock:
            self._undo.append(self._current)
            if len(self._undo) > self._limit:
                del self._undo[: len(self._undo) - self._limit]
            self._redo.clear()
            self._current = copy.deepcopy(new_store)
            self._persist()

    def update(self, transform: Callable[[CalendarData], CalendarData]) -> CalendarData:
        """Read-modify-write under the lock. Returns the new current calendar."""
        with self._lock:
            new_store = transform(copy.deepcopy(self._current))
            self.mutate(new_store)
            return self.current

    def undo(self) -> bool:
        with self._lock:
            if not self._undo:
                return False
            previous = self._undo.pop()
            self._redo.append(self._current)
            self._current = previous
            self._persist()
            logger.debug("Undo (%d left)", len(self._undo))
            return True

    def redo(self) -> bool:
        with self._lock:
            if not self._redo:
                return False
            following = self._redo.pop()
            self._undo.append(self._current)
            self._current = following
            self._persist()
            logger.debug("Redo (%d left)", len(self._redo))
            return True

    def _persist(self) -> None:
        if not self._store.save(self._current):
            logger.info("Calendar kept in memory only; persist failed")
