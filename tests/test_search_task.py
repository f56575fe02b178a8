import time

from core.data_structures import PROGRESS_DONE
from core.match_list import MatchList
from core.progress import MODE_DETERMINATE, MODE_DONE, MODE_INDETERMINATE, ProgressCounter
from core.search_task import SearchTask, TaskState
from core.task_supervisor import TaskSupervisor
from core.ui_channel import UiChannel
from helpers import FakeNode


def make_task(scope, pattern=b"wor", on_finished=None):
    channel = UiChannel()
    task = SearchTask(scope, pattern, channel, MatchList(), ProgressCounter(), on_finished=on_finished)
    task.progress.reset(sum(root.size() for root in scope))
    return task, channel


def test_completed_task_posts_matches_then_done(sample_tree):
    finished = []
    task, channel = make_task([sample_tree], on_finished=finished.append)
    events = []
    task.progress.observe(lambda p: events.append(("progress", p.mode)))

    class Recorder:
        def interval_added(self, source, index0, index1):
            events.append(("match", source.get(index0).name))

    task.results.observe(Recorder())
    assert task.state == TaskState.CREATED

    task.start()
    assert task.join(5)
    channel.run_pending()

    assert task.state == TaskState.COMPLETED
    assert finished == [task]
    assert [node.name for node in task.results] == ["A.txt"]
    done_events = [e for e in events if e == ("progress", MODE_DONE)]
    assert len(done_events) == 1
    # Done is the last progress event and comes after every match
    assert events[-1] == ("progress", MODE_DONE)
    assert task.progress.value == task.progress.maximum


def test_cancel_before_start(sample_tree):
    finished = []
    task, channel = make_task([sample_tree], on_finished=finished.append)
    task.cancel()
    task.start()
    assert task.join(5)
    channel.run_pending()

    assert task.state == TaskState.CANCELLED
    assert task.results.size() == 0
    assert task.progress.mode == MODE_DETERMINATE
    assert task.progress.value == 0
    assert finished == [task]


def test_worker_never_touches_results_directly(sample_tree):
    task, channel = make_task([sample_tree])
    task.start()
    assert task.join(5)
    # Nothing is visible until the UI thread drains the channel
    assert task.results.size() == 0
    channel.run_pending()
    assert task.results.size() == 1


def test_join_on_unstarted_task_returns_immediately(sample_tree):
    task, _ = make_task([sample_tree])
    assert task.join(0.01)


def slow_tree(matching_file, count=200, delay=0.01):
    leaves = [FakeNode(f"slow{i}", file_path=matching_file, size=1,
                       on_resolve=lambda node: time.sleep(delay))
              for i in range(count)]
    return FakeNode("slow", leaves)


def test_second_search_cancels_first(matching_file, sample_tree):
    channel = UiChannel()
    supervisor = TaskSupervisor(channel, retire_timeout=2.0)

    first_results, first_progress = MatchList(), ProgressCounter()
    first = supervisor.start_search([slow_tree(matching_file)], b"needle", first_results, first_progress)
    time.sleep(0.05)

    second_results, second_progress = MatchList(), ProgressCounter()
    second = supervisor.start_search([sample_tree], b"wor", second_results, second_progress)

    # The old task was retired before the new one was installed
    assert not first.is_alive
    assert first.state == TaskState.CANCELLED
    assert supervisor.current is second

    assert second.join(5)
    channel.run_pending()
    assert [node.name for node in second_results] == ["A.txt"]
    assert second_progress.mode == MODE_DONE
    assert first_progress.mode != MODE_DONE
    assert first_results.size() < 200


def test_retire_timeout_abandons_stuck_task(matching_file, sample_tree, gate, caplog):
    channel = UiChannel()
    supervisor = TaskSupervisor(channel, retire_timeout=0.1)
    stuck = FakeNode("stuck", file_path=matching_file, size=1, on_resolve=lambda node: gate.wait(5))

    first_results = MatchList()
    first = supervisor.start_search([FakeNode("root", [stuck])], b"needle", first_results, ProgressCounter())
    time.sleep(0.05)

    second_results = MatchList()
    started = time.monotonic()
    second = supervisor.start_search([sample_tree], b"wor", second_results, ProgressCounter())
    assert time.monotonic() - started < 2.0
    assert "did not stop" in caplog.text
    assert first.is_alive
    assert supervisor.current is second

    gate.set()
    assert first.join(5)
    assert second.join(5)
    channel.run_pending()
    # The stuck scan finished after cancellation, so its hit was dropped
    assert first_results.size() == 0
    assert [node.name for node in second_results] == ["A.txt"]


def test_scope_is_measured_by_the_worker(sample_tree):
    channel = UiChannel()
    supervisor = TaskSupervisor(channel)
    progress = ProgressCounter()
    progress.set_value(PROGRESS_DONE)
    sizes = []
    progress.observe(lambda p: sizes.append((p.mode, p.maximum)))

    task = supervisor.start_search([sample_tree], b"wor", MatchList(), progress)
    # Nothing was measured on the calling thread
    assert progress.mode == MODE_INDETERMINATE
    assert progress.maximum == 0

    assert task.join(5)
    channel.run_pending()
    assert (MODE_DETERMINATE, 18) in sizes
    assert progress.is_done
    assert progress.maximum == 18


def test_cancel_while_measuring_posts_partial_range(sample_tree, gate):
    channel = UiChannel()
    supervisor = TaskSupervisor(channel)
    progress = ProgressCounter()
    results = MatchList()

    def slow_size():
        gate.wait(5)
        return 5

    slow_root = FakeNode("slow", [])
    slow_root.size = slow_size

    task = supervisor.start_search([slow_root, sample_tree], b"wor", results, progress)
    time.sleep(0.05)
    supervisor.dispose()
    gate.set()
    assert task.join(5)
    channel.run_pending()

    assert task.state == TaskState.CANCELLED
    assert progress.mode == MODE_DETERMINATE
    assert progress.maximum == 5
    assert results.size() == 0


def test_dispose_cancels_without_blocking(matching_file, gate):
    channel = UiChannel()
    supervisor = TaskSupervisor(channel)
    stuck = FakeNode("stuck", file_path=matching_file, size=1, on_resolve=lambda node: gate.wait(5))
    task = supervisor.start_search([FakeNode("root", [stuck, stuck])], b"needle",
                                   MatchList(), ProgressCounter())
    time.sleep(0.05)

    started = time.monotonic()
    supervisor.dispose()
    assert time.monotonic() - started < 0.5
    assert supervisor.current is None
    assert task.cancel_event.is_set()

    gate.set()
    assert task.join(5)
    assert task.state == TaskState.CANCELLED


def test_release_only_clears_matching_task(sample_tree):
    channel = UiChannel()
    supervisor = TaskSupervisor(channel)
    task = supervisor.start_search([sample_tree], b"wor", MatchList(), ProgressCounter())
    other = SearchTask([sample_tree], b"wor", channel, MatchList(), ProgressCounter())
    assert not supervisor.release(other)
    assert supervisor.current is task
    assert supervisor.release(task)
    assert supervisor.current is None
    assert task.join(5)
