import time

from amrdispatch.monitor import format_task, render_lines, run_monitor, status_label
from amrdispatch.task_queue import Task, TaskQueue, TaskStatus


class FakeScreen:
    def __init__(self, keys):
        self.keys = list(keys)
        self.frames = []
        self.current = []
        self.timeouts = []

    def clear(self):
        self.current = []

    def addstr(self, row, col, text):
        self.current.append((row, col, text))

    def refresh(self):
        self.frames.append(list(self.current))

    def timeout(self, ms):
        self.timeouts.append(ms)

    def getch(self):
        return self.keys.pop(0)


def test_status_labels():
    assert status_label(TaskStatus.PENDING) == "PENDING"
    assert status_label(TaskStatus.RUNNING) == "RUNNING"
    assert status_label(TaskStatus.COMPLETED) == "DONE"
    assert status_label(TaskStatus.CANCELLED) == "CANCEL"


def test_format_pending_task():
    task = Task(task_id=3, client_id=4, priority=1, job_desc="REQUEST job=a", wait_start_time=100)
    assert format_task(task, 130) == [
        "TaskID=3  Client=4",
        "  Job=REQUEST job=a",
        "  Status=PENDING  Wait=30s  Run=0s",
    ]


def test_format_completed_task_has_no_wait():
    task = Task(
        task_id=1,
        client_id=1,
        priority=1,
        job_desc="x",
        status=TaskStatus.COMPLETED,
        wait_start_time=0,
        start_time=10,
        end_time=25,
    )
    assert format_task(task, 999)[2] == "  Status=DONE  Wait=0s  Run=15s"


def test_format_cancelled_task_shows_zeroes():
    task = Task(task_id=1, client_id=1, priority=1, job_desc="x", status=TaskStatus.CANCELLED)
    assert format_task(task, task.wait_start_time + 50)[2].endswith("Wait=0s  Run=0s")


def test_render_empty_panel():
    assert render_lines([], 0) == [
        "AMR Task Monitor",
        "------------------------",
        "",
        "[q] Quit Panel",
    ]


def test_render_two_tasks_layout():
    first = Task(task_id=1, client_id=1, priority=1, job_desc="a")
    second = Task(task_id=2, client_id=2, priority=2, job_desc="b")
    now = first.wait_start_time
    lines = render_lines([first, second], now)
    assert lines[2:5] == format_task(first, now)
    assert lines[5] == ""
    assert lines[6:9] == format_task(second, now)
    assert lines[-1] == "[q] Quit Panel"
    assert len(lines) == 2 + 2 * 4 + 2


def test_run_monitor_draws_queue_and_quits():
    queue = TaskQueue()
    queue.enqueue(Task(task_id=5, client_id=9, priority=1, job_desc="REQUEST job=b"))
    screen = FakeScreen([-1, ord("Q")])
    run_monitor(queue, screen)
    assert len(screen.frames) == 2
    texts = [text for _, _, text in screen.frames[0]]
    assert texts[0] == "AMR Task Monitor"
    assert "TaskID=5  Client=9" in texts
    assert texts[-1] == "[q] Quit Panel"
    assert screen.timeouts == [1000, 1000]


def test_run_monitor_rows_are_sequential():
    queue = TaskQueue()
    screen = FakeScreen([ord("q")])
    run_monitor(queue, screen)
    rows = [row for row, _, _ in screen.frames[0]]
    assert rows == list(range(len(rows)))
    assert len(rows) == len(render_lines([], int(time.time())))