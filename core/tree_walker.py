# core/tree_walker.py

"""Depth-first walk over a search scope, scanning every file for a pattern."""
import logging
from threading import Event
from typing import Callable, Iterable, Optional

from core.byte_scanner import contains_pattern
from core.data_structures import DEFAULT_WINDOW_SIZE
from core.exceptions import EmptyPatternError

logger = logging.getLogger(__name__)


class TreeWalker:
    """Walks tree nodes and reports the leaves whose file contains a pattern.

    Nodes must provide ``is_leaf``, iteration over their children,
    ``size()`` and ``make_file_for_node()``. Roots may also provide
    ``refresh()`` to drop cached listings before a new search.

    Progress is counted in bytes: after each leaf the running total grows by
    that leaf's ``size()``, so the final value equals the sum of the scope
    roots' sizes.
    """

    def __init__(self, pattern: bytes, cancel_event: Event,
                 on_match: Callable, on_progress: Optional[Callable[[int], None]] = None,
                 window_size: int = DEFAULT_WINDOW_SIZE):
        if not pattern:
            raise EmptyPatternError("Search pattern must not be empty")
        self.pattern = bytes(pattern)
        self.cancel_event = cancel_event
        self.on_match = on_match
        self.on_progress = on_progress
        self.window_size = window_size
        self.value = 0
        self.visited = 0

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def measure(self, scope: Iterable) -> int:
        """Refresh the scope roots and return their total byte size.

        Stops early, returning the partial total, once cancelled.
        """
        total = 0
        for root in scope:
            if self.cancelled:
                break
            refresh = getattr(root, 'refresh', None)
            if refresh is not None:
                refresh()
            total += root.size()
        return total

    def walk(self, scope: Iterable) -> bool:
        """Walk every root of the scope.

        Returns:
            True if all roots were walked, False if cancellation stopped it.
        """
        for root in scope:
            if self.cancelled:
                return False
            if root.is_leaf:
                self._process_file(root)
            elif not self._process_folder(root):
                return False
        return not self.cancelled

    def _process_folder(self, folder) -> bool:
        for node in folder:
            if self.cancelled:
                return False
            if node.is_leaf:
                self._process_file(node)
            elif not self._process_folder(node):
                return False
        return True

    def _process_file(self, node):
        self.visited += 1
        path = node.make_file_for_node()
        if path is not None:
            try:
                found = contains_pattern(self.pattern, path, self.window_size)
            except OSError as e:
                logger.error("Error during text search in '%s': %s", path, e)
                found = False
            # A hit completed after cancellation is dropped
            if found and not self.cancelled:
                self.on_match(node)

        self.value += node.size()
        if self.on_progress and not self.cancelled:
            self.on_progress(self.value)
