import time

import pytest

from core.data_structures import ScanSettings, SearchRequest
from core.exceptions import EmptyPatternError, PatternEncodingError
from core.file_tree import FileNode
from core.progress import MODE_DONE
from core.search_controller import SearchController, encode_pattern
from core.search_task import TaskState
from helpers import FakeNode, wait_and_drain


@pytest.fixture
def controller():
    ctrl = SearchController(settings=ScanSettings(window_size=4096, retire_timeout=2.0))
    yield ctrl
    ctrl.dispose()


def test_hello_world_scenario(controller, sample_tree):
    task = controller.start_search([sample_tree], "wor", "UTF-8")
    wait_and_drain(controller, task)
    assert [node.name for node in controller.results] == ["A.txt"]
    assert controller.progress.mode == MODE_DONE


def test_start_request_uses_request_encoding(controller, tmp_path):
    (tmp_path / "wide.txt").write_bytes("hello world".encode("utf-16-le"))
    (tmp_path / "narrow.txt").write_bytes(b"hello world")
    request = SearchRequest(scope=(FileNode(tmp_path),), pattern_text="wor", encoding="UTF-16LE")
    task = controller.start_request(request)
    wait_and_drain(controller, task)
    assert [node.name for node in controller.results] == ["wide.txt"]
    assert controller.last_encoding == "UTF-16LE"


def test_each_search_gets_fresh_collections(controller, sample_tree):
    first = controller.start_search([sample_tree], "wor")
    wait_and_drain(controller, first)
    first_results, first_progress = controller.results, controller.progress

    second = controller.start_search([sample_tree], "bye")
    wait_and_drain(controller, second)

    assert controller.results is not first_results
    assert controller.progress is not first_progress
    assert [node.name for node in first_results] == ["A.txt"]
    assert [node.name for node in controller.results] == ["B.txt"]


def test_restart_keeps_only_second_search_results(controller, tmp_path, sample_tree):
    slow_file = tmp_path / "slow.txt"
    slow_file.write_bytes(b"wor")
    slow = FakeNode("slow", [FakeNode(f"s{i}", file_path=slow_file, size=3,
                                      on_resolve=lambda node: time.sleep(0.01))
                             for i in range(300)])
    controller.start_search([slow], "wor")
    time.sleep(0.05)
    controller.process_pending()

    second = controller.start_search([sample_tree], "wor")
    wait_and_drain(controller, second)
    time.sleep(0.05)
    controller.process_pending()

    assert [node.name for node in controller.results] == ["A.txt"]


def test_encoding_error_is_raised_synchronously(controller, sample_tree):
    with pytest.raises(PatternEncodingError):
        controller.start_search([sample_tree], "grüße", "ascii")
    assert controller.current_task is None


def test_unknown_encoding(controller, sample_tree):
    with pytest.raises(PatternEncodingError) as excinfo:
        controller.start_search([sample_tree], "hello", "no-such-charset")
    assert excinfo.value.encoding == "no-such-charset"
    assert controller.last_encoding == "UTF-8"


def test_empty_text_rejected(controller, sample_tree):
    with pytest.raises(EmptyPatternError):
        controller.start_search([sample_tree], "", "UTF-8")
    assert controller.current_task is None


def test_first_match_selected_once(controller, tmp_path):
    for name in ("a.txt", "b.txt", "c.txt"):
        (tmp_path / name).write_bytes(b"needle")
    selected = []
    controller.on_first_match = selected.append
    task = controller.start_search([FileNode(tmp_path)], "needle")
    wait_and_drain(controller, task)
    assert controller.results.size() == 3
    assert selected == [0]


def test_finished_callback_and_slot_release(controller, sample_tree):
    finished = []
    controller.on_finished = finished.append
    task = controller.start_search([sample_tree], "wor")
    assert controller.is_searching
    wait_and_drain(controller, task)
    assert finished == [task]
    assert task.state == TaskState.COMPLETED
    assert controller.current_task is None
    assert not controller.is_searching


def test_retired_task_does_not_report_finished(controller, matching_file, sample_tree, gate):
    finished = []
    controller.on_finished = finished.append
    stuck = FakeNode("stuck", file_path=matching_file, size=1, on_resolve=lambda node: gate.wait(5))
    first = controller.start_search([FakeNode("root", [stuck, stuck])], "needle")
    time.sleep(0.05)
    gate.set()

    second = controller.start_search([sample_tree], "wor")
    assert first.join(5)
    wait_and_drain(controller, second)
    assert finished == [second]


def test_new_search_callback_receives_fresh_objects(controller, sample_tree):
    seen = []
    controller.on_new_search = lambda results, progress: seen.append((results, progress))
    task = controller.start_search([sample_tree], "wor")
    assert seen == [(controller.results, controller.progress)]
    wait_and_drain(controller, task)
    assert seen[0][1].maximum == 18


def test_encode_pattern():
    assert encode_pattern("abc", "UTF-16LE") == b"a\x00b\x00c\x00"
    with pytest.raises(PatternEncodingError):
        encode_pattern("€", "latin-1")


def test_idna_label_errors_become_pattern_errors(controller, sample_tree):
    with pytest.raises(PatternEncodingError) as excinfo:
        controller.start_search([sample_tree], "a" * 70, "idna")
    assert excinfo.value.encoding == "idna"
    assert controller.current_task is None


def test_repeat_search_sees_new_files(controller, sample_tree):
    first = controller.start_search([sample_tree], "wor")
    wait_and_drain(controller, first)
    assert [node.name for node in controller.results] == ["A.txt"]

    (sample_tree.path / "C.txt").write_bytes(b"another world")
    second = controller.start_search([sample_tree], "wor")
    wait_and_drain(controller, second)
    assert [node.name for node in controller.results] == ["A.txt", "C.txt"]
    assert controller.progress.maximum == 31


def test_first_match_selected_after_view_has_the_row(controller, sample_tree):
    rows = []
    rows_at_selection = []

    class RowRecorder:
        def interval_added(self, source, index0, index1):
            rows.append(source.get(index0))

    controller.on_new_search = lambda results, progress: results.observe(RowRecorder())
    controller.on_first_match = lambda index: rows_at_selection.append(len(rows))
    task = controller.start_search([sample_tree], "wor")
    wait_and_drain(controller, task)
    assert rows_at_selection == [1]
