# core/ui_channel.py

"""FIFO channel carrying worker posts to the UI thread."""
import queue
from typing import Callable, Optional


class UiChannel:
    """Thread-safe callback queue drained on the UI thread.

    Background workers call ``post``; the UI thread calls ``run_pending``
    (directly, or through ``root.after`` polling in the desktop window).
    Posts run in the order they were made.
    """

    def __init__(self):
        self._queue = queue.Queue()

    def post(self, callback: Callable, *args):
        self._queue.put((callback, args))

    def run_pending(self, limit: Optional[int] = None) -> int:
        """Run queued callbacks; returns how many were executed."""
        executed = 0
        while limit is None or executed < limit:
            try:
                callback, args = self._queue.get_nowait()
            except queue.Empty:
                break
            callback(*args)
            executed += 1
        return executed

    def has_pending(self) -> bool:
        return not self._queue.empty()
