# core/progress.py

"""Observable progress counter backing the search progress bar."""
import logging
from typing import Callable, List

from core.data_structures import PROGRESS_DONE

logger = logging.getLogger(__name__)

MODE_DETERMINATE = 'determinate'
MODE_INDETERMINATE = 'indeterminate'
MODE_DONE = 'done'


class ProgressCounter:
    """Progress value in ``[0, maximum]`` with three display modes.

    ``set_value`` understands two special values: ``PROGRESS_DONE`` switches to
    the finished mode (full bar, disabled) and any negative value switches to
    the indeterminate mode.
    """

    def __init__(self, maximum: int = 0):
        self.maximum = max(0, maximum)
        self.value = 0
        self.mode = MODE_DETERMINATE
        self.enabled = True
        self._observers: List[Callable[['ProgressCounter'], None]] = []

    def observe(self, observer: Callable[['ProgressCounter'], None]):
        self._observers.append(observer)

    def unobserve(self, observer: Callable[['ProgressCounter'], None]):
        if observer in self._observers:
            self._observers.remove(observer)

    @property
    def is_done(self) -> bool:
        return self.mode == MODE_DONE

    def reset(self, maximum: int):
        """Start a new determinate run at zero."""
        self.maximum = max(0, maximum)
        self.value = 0
        self.mode = MODE_DETERMINATE
        self.enabled = True
        self._notify()

    def set_value(self, value: int):
        """Apply a progress update posted by the search task."""
        if value == PROGRESS_DONE:
            self.mode = MODE_DONE
            self.enabled = False
            self.value = self.maximum
        elif value < 0:
            self.mode = MODE_INDETERMINATE
            self.enabled = True
        else:
            if self.mode == MODE_DONE:
                logger.debug("Ignoring progress %d after completion", value)
                return
            self.mode = MODE_DETERMINATE
            self.enabled = True
            # Monotonic within a run
            self.value = max(self.value, min(value, self.maximum))
        self._notify()

    def _notify(self):
        for observer in list(self._observers):
            observer(self)
