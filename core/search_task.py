# core/search_task.py

"""A single cancellable background text search."""
import itertools
import logging
from enum import Enum
from threading import Event, Thread
from typing import Callable, Optional, Sequence

from core.data_structures import DEFAULT_WINDOW_SIZE, PROGRESS_DONE
from core.match_list import MatchList
from core.progress import ProgressCounter
from core.tree_walker import TreeWalker
from core.ui_channel import UiChannel

logger = logging.getLogger(__name__)

_task_ids = itertools.count(1)


class TaskState(Enum):
    CREATED = 'created'
    RUNNING = 'running'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class SearchTask:
    """Owns one walk of a fixed scope for a fixed pattern on a worker thread.

    Everything the UI can see (matches, progress, the finished notification)
    is posted through ``channel``; the worker never touches ``results`` or
    ``progress`` itself.
    """

    def __init__(self, scope: Sequence, pattern: bytes, channel: UiChannel,
                 results: MatchList, progress: ProgressCounter,
                 window_size: int = DEFAULT_WINDOW_SIZE,
                 on_finished: Optional[Callable[['SearchTask'], None]] = None):
        self.task_id = next(_task_ids)
        self.scope = tuple(scope)
        self.pattern = bytes(pattern)
        self.channel = channel
        self.results = results
        self.progress = progress
        self.on_finished = on_finished
        self.cancel_event = Event()
        self.state = TaskState.CREATED
        self.walker = TreeWalker(self.pattern, self.cancel_event,
                                 on_match=self._post_match,
                                 on_progress=self._post_progress,
                                 window_size=window_size)
        self._thread = Thread(target=self._run, name=f"FindTextSearch-{self.task_id}")
        self._thread.daemon = True

    @property
    def is_alive(self) -> bool:
        return self._thread.is_alive()

    @property
    def is_finished(self) -> bool:
        return self.state in (TaskState.COMPLETED, TaskState.CANCELLED)

    def start(self):
        self.state = TaskState.RUNNING
        self._thread.start()

    def cancel(self):
        """Signal cancellation; the worker stops at its next check."""
        self.cancel_event.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker to exit; returns False on timeout."""
        if self.state == TaskState.CREATED:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _post_match(self, node):
        self.channel.post(self.results.append, node)

    def _post_progress(self, value: int):
        self.channel.post(self.progress.set_value, value)

    def _run(self):
        logger.debug("Search %d started over %d root(s)", self.task_id, len(self.scope))
        completed = False
        measured = False
        try:
            # Measuring may list the whole tree; it stays on the worker
            total = self.walker.measure(self.scope)
            self.channel.post(self.progress.reset, total)
            measured = True
            if not self.walker.cancelled:
                completed = self.walker.walk(self.scope)
        except Exception:
            logger.exception("Search %d failed", self.task_id)
            if not measured:
                self.channel.post(self.progress.reset, 0)

        if completed:
            self.channel.post(self.progress.set_value, PROGRESS_DONE)
            self.state = TaskState.COMPLETED
        else:
            self.state = TaskState.CANCELLED
        logger.debug("Search %d %s after %d file(s)", self.task_id,
                     self.state.value, self.walker.visited)

        if self.on_finished:
            self.channel.post(self.on_finished, self)

    def __repr__(self) -> str:
        return f"SearchTask(id={self.task_id}, state={self.state.value})"
