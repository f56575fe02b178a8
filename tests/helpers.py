"""Test doubles shared by the search tests."""


class FakeNode:
    """In-memory tree node; leaves point at a real file (or nothing)."""

    def __init__(self, name, children=None, file_path=None, size=0, on_resolve=None):
        self.name = name
        self._children = children
        self.file_path = file_path
        self._size = size
        self.on_resolve = on_resolve

    @property
    def is_leaf(self):
        return self._children is None

    def __iter__(self):
        return iter(self._children or [])

    def size(self):
        if self.is_leaf:
            return self._size
        return sum(child.size() for child in self._children)

    def make_file_for_node(self):
        if self.on_resolve:
            self.on_resolve(self)
        return self.file_path

    def __repr__(self):
        return f"FakeNode({self.name!r})"


def wait_and_drain(controller, task, timeout=10.0):
    """Wait for a task's worker to exit, then apply all of its posts."""
    assert task.join(timeout), "search task did not finish"
    controller.process_pending()
