# core/task_supervisor.py

"""Keeps at most one live search task and retires superseded ones."""
import logging
from threading import Lock
from typing import Callable, Optional, Sequence

from core.data_structures import (
    DEFAULT_RETIRE_TIMEOUT, DEFAULT_WINDOW_SIZE, PROGRESS_INDETERMINATE
)
from core.match_list import MatchList
from core.progress import ProgressCounter
from core.search_task import SearchTask
from core.ui_channel import UiChannel

logger = logging.getLogger(__name__)


class TaskSupervisor:
    """Single-slot holder of the current search task.

    The slot is the only state shared between the UI thread and workers; it
    is read and replaced in one step under a lock. A task is trusted by the
    UI only while it sits in the slot.
    """

    def __init__(self, channel: UiChannel, retire_timeout: float = DEFAULT_RETIRE_TIMEOUT,
                 window_size: int = DEFAULT_WINDOW_SIZE):
        self.channel = channel
        self.retire_timeout = retire_timeout
        self.window_size = window_size
        self._lock = Lock()
        self._current: Optional[SearchTask] = None

    @property
    def current(self) -> Optional[SearchTask]:
        with self._lock:
            return self._current

    def _exchange(self, task: Optional[SearchTask]) -> Optional[SearchTask]:
        with self._lock:
            old, self._current = self._current, task
        return old

    def start_search(self, scope: Sequence, pattern: bytes, results: MatchList,
                     progress: ProgressCounter,
                     on_finished: Optional[Callable[[SearchTask], None]] = None) -> SearchTask:
        """Retire any running search, then start a new one and make it current."""
        old_task = self._exchange(None)
        if old_task is not None:
            self._retire(old_task)

        scope = tuple(scope)
        task = SearchTask(scope, pattern, self.channel, results, progress,
                          window_size=self.window_size, on_finished=on_finished)

        # The worker posts the real range once it has measured the scope
        progress.reset(0)
        progress.set_value(PROGRESS_INDETERMINATE)
        task.start()

        replaced = self._exchange(task)
        if replaced is not None:
            # Another start_search slipped in between; it loses the slot
            logger.warning("Search %d superseded while starting search %d",
                           replaced.task_id, task.task_id)
            replaced.cancel()
        return task

    def release(self, task: SearchTask) -> bool:
        """Clear the slot if it still holds ``task``; True if it did."""
        with self._lock:
            if task is not None and task is self._current:
                self._current = None
                return True
        return False

    def _retire(self, task: SearchTask):
        task.cancel()
        if not task.join(self.retire_timeout):
            logger.warning("Search %d did not stop within %.1fs; continuing without it",
                           task.task_id, self.retire_timeout)

    def dispose(self):
        """Cancel the current search without waiting for it."""
        task = self._exchange(None)
        if task is not None:
            task.cancel()
