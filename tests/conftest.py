import threading

import pytest

from core.file_tree import FileNode


@pytest.fixture
def sample_tree(tmp_path):
    root = tmp_path / "docs"
    root.mkdir()
    (root / "A.txt").write_bytes(b"hello world")
    (root / "B.txt").write_bytes(b"goodbye")
    return FileNode(root)


@pytest.fixture
def matching_file(tmp_path):
    path = tmp_path / "match.bin"
    path.write_bytes(b"xxneedlexx")
    return path


@pytest.fixture
def gate():
    event = threading.Event()
    yield event
    # Never leave a worker blocked behind the gate
    event.set()
