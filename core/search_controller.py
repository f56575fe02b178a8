# core/search_controller.py

"""UI-facing entry point for starting and stopping text searches."""
import codecs
import logging
from typing import Callable, Optional, Sequence

from core.data_structures import DEFAULT_ENCODING, ScanSettings, SearchRequest
from core.exceptions import EmptyPatternError, PatternEncodingError
from core.match_list import MatchList, MatchListListener
from core.progress import ProgressCounter
from core.search_task import SearchTask
from core.task_supervisor import TaskSupervisor
from core.ui_channel import UiChannel

logger = logging.getLogger(__name__)


def encode_pattern(text: str, encoding: str) -> bytes:
    """Convert search text to the byte pattern searched for in files."""
    try:
        codecs.lookup(encoding)
        return text.encode(encoding)
    except LookupError as e:
        raise PatternEncodingError(text, encoding, "unknown encoding") from e
    except UnicodeError as e:
        # Codecs like idna raise plain UnicodeError without a reason
        raise PatternEncodingError(text, encoding, getattr(e, 'reason', None) or str(e)) from e


class _FirstMatchSelector(MatchListListener):
    """Asks the controller to select the first result of the current run."""

    def __init__(self, controller: 'SearchController'):
        self.controller = controller

    def interval_added(self, source: MatchList, index0: int, index1: int):
        if index0 == 0 and source is self.controller.results:
            if self.controller.on_first_match:
                self.controller.on_first_match(index0)


class SearchController:
    """Owns the result list and progress counter shown by the UI.

    Each ``start_search`` replaces both with fresh objects, so a retired task
    that is still winding down can only touch collections nobody looks at.
    All callbacks run on the thread that drains ``channel``.

    Callbacks:
        on_new_search(results, progress): fresh collections were installed.
        on_first_match(index): the first match of the current run arrived.
        on_finished(task): the current task completed or was cancelled.
    """

    def __init__(self, channel: Optional[UiChannel] = None,
                 settings: Optional[ScanSettings] = None,
                 default_encoding: str = DEFAULT_ENCODING):
        self.channel = channel or UiChannel()
        self.settings = settings or ScanSettings()
        self.supervisor = TaskSupervisor(self.channel,
                                         retire_timeout=self.settings.retire_timeout,
                                         window_size=self.settings.window_size)
        self.results = MatchList()
        self.progress = ProgressCounter()
        self.last_encoding = default_encoding
        self.on_new_search: Optional[Callable[[MatchList, ProgressCounter], None]] = None
        self.on_first_match: Optional[Callable[[int], None]] = None
        self.on_finished: Optional[Callable[[SearchTask], None]] = None
        self._first_match_selector = _FirstMatchSelector(self)

    @property
    def current_task(self) -> Optional[SearchTask]:
        return self.supervisor.current

    @property
    def is_searching(self) -> bool:
        task = self.supervisor.current
        return task is not None and not task.is_finished

    def start_request(self, request: SearchRequest) -> SearchTask:
        return self.start_search(request.scope, request.pattern_text, request.encoding)

    def start_search(self, scope: Sequence, pattern_text: str,
                     encoding: Optional[str] = None) -> SearchTask:
        """Start searching ``scope`` for ``pattern_text`` encoded with ``encoding``.

        Raises:
            PatternEncodingError: The text cannot be encoded; nothing is started.
            EmptyPatternError: The text encodes to no bytes.
        """
        encoding = encoding or self.last_encoding
        pattern = encode_pattern(pattern_text, encoding)
        if not pattern:
            raise EmptyPatternError("Search text must not be empty")
        self.last_encoding = encoding

        self.results.unobserve(self._first_match_selector)
        self.results = MatchList()
        self.progress = ProgressCounter()
        if self.on_new_search:
            self.on_new_search(self.results, self.progress)
        # Registered last so views have drawn row 0 before it is selected
        self.results.observe(self._first_match_selector)

        logger.info("Searching %d root(s) for %d byte(s) (%s)",
                    len(scope), len(pattern), encoding)
        return self.supervisor.start_search(scope, pattern, self.results, self.progress,
                                            on_finished=self._handle_finished)

    def _handle_finished(self, task: SearchTask):
        if not self.supervisor.release(task):
            logger.debug("Ignoring finish of retired search %d", task.task_id)
            return
        logger.info("Search %d %s with %d match(es)", task.task_id,
                    task.state.value, self.results.size())
        if self.on_finished:
            self.on_finished(task)

    def process_pending(self, limit: Optional[int] = None) -> int:
        """Apply queued worker updates; call from the UI thread."""
        return self.channel.run_pending(limit)

    def dispose(self):
        self.supervisor.dispose()
