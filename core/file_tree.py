# core/file_tree.py

"""Filesystem-backed tree of files and folders used as a search scope."""
import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Union

logger = logging.getLogger(__name__)


class FileNode:
    """A file (leaf) or folder (branch) of the tree being searched.

    Children are listed lazily on first iteration, folders first, then files,
    each group sorted by name. Symbolic links to folders are treated as leaves
    so a walk never loops. Listings and sizes are cached until ``refresh()``.
    """

    def __init__(self, path: Union[str, Path], parent: Optional['FileNode'] = None):
        self.path = Path(path)
        self.parent = parent
        self._children: Optional[List['FileNode']] = None
        self._size: Optional[int] = None

    @property
    def name(self) -> str:
        return self.path.name or str(self.path)

    @property
    def is_leaf(self) -> bool:
        return self.path.is_symlink() or not self.path.is_dir()

    def children(self) -> List['FileNode']:
        if self.is_leaf:
            return []
        if self._children is None:
            self._children = self._list_children()
        return self._children

    def _list_children(self) -> List['FileNode']:
        try:
            entries = list(os.scandir(self.path))
        except OSError as e:
            logger.warning("Cannot list folder %s: %s", self.path, e)
            return []

        def sort_key(entry):
            try:
                is_folder = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_folder = False
            return (not is_folder, entry.name.lower(), entry.name)

        return [FileNode(entry.path, self) for entry in sorted(entries, key=sort_key)]

    def refresh(self):
        """Forget cached children and sizes so the next walk sees the disk again."""
        self._children = None
        self._size = None

    def __iter__(self) -> Iterator['FileNode']:
        return iter(self.children())

    def size(self) -> int:
        """Total byte length of all files at or below this node.

        The first call on a folder lists the whole subtree, so call it from
        the search worker rather than the UI thread.
        """
        if self._size is None:
            if self.is_leaf:
                try:
                    self._size = self.path.stat().st_size if self.path.is_file() else 0
                except OSError:
                    self._size = 0
            else:
                self._size = sum(child.size() for child in self.children())
        return self._size

    def make_file_for_node(self) -> Optional[Path]:
        """Physical file behind a leaf, or None if there is none."""
        return self.path if self.path.is_file() else None

    def __eq__(self, other) -> bool:
        return isinstance(other, FileNode) and self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        return f"FileNode({str(self.path)!r})"
