# core/match_list.py

"""Append-only observable list of matched tree nodes."""
from typing import Any, Iterator, List


class MatchListListener:
    """Receives change events from a MatchList.

    Only additions exist; ``index0`` and ``index1`` are inclusive bounds.
    """

    def interval_added(self, source: 'MatchList', index0: int, index1: int):
        pass


class MatchList:
    """Ordered results of one search run, in discovery order.

    Mutated only from the UI thread (through posts from the search task), so
    no locking is done here. A new search gets a new MatchList.
    """

    def __init__(self):
        self._items: List[Any] = []
        self._listeners: List[MatchListListener] = []

    def append(self, node):
        self._items.append(node)
        index = len(self._items) - 1
        for listener in list(self._listeners):
            listener.interval_added(self, index, index)

    def observe(self, listener: MatchListListener):
        self._listeners.append(listener)

    def unobserve(self, listener: MatchListListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def get(self, index: int):
        return self._items[index]

    def size(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int):
        return self._items[index]

    def __iter__(self) -> Iterator:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return f"MatchList({self._items!r})"
