"""Text panel that shows the cargo queue while the server runs."""

from __future__ import annotations

from typing import Any, Iterable

from .task_queue import Task, TaskQueue, TaskStatus

TITLE = "AMR Task Monitor"
SEPARATOR = "-" * 24
QUIT_HINT = "[q] Quit Panel"
REFRESH_MS = 1000

_LABELS = {
    TaskStatus.PENDING: "PENDING",
    TaskStatus.RUNNING: "RUNNING",
    TaskStatus.COMPLETED: "DONE",
    TaskStatus.CANCELLED: "CANCEL",
}


def status_label(status: TaskStatus) -> str:
    """Short label shown for a task status."""
    return _LABELS.get(status, "UNKNOWN")


def format_task(task: Task, now: int) -> list[str]:
    """The three panel lines describing one task at time ``now``."""
    wait = now - task.wait_start_time if task.status is TaskStatus.PENDING else 0
    running = task.status in (TaskStatus.RUNNING, TaskStatus.COMPLETED)
    run = task.end_time - task.start_time if running else 0
    return [
        f"TaskID={task.task_id}  Client={task.client_id}",
        f"  Job={task.job_desc}",
        f"  Status={status_label(task.status)}  Wait={wait}s  Run={run}s",
    ]


def render_lines(tasks: Iterable[Task], now: int) -> list[str]:
    """Every line of the panel, top to bottom."""
    lines = [TITLE, SEPARATOR]
    for task in tasks:
        lines.extend(format_task(task, now))
        lines.append("")
    lines.extend(["", QUIT_HINT])
    return lines


def run_monitor(queue: TaskQueue, stdscr: Any) -> None:
    """Redraw the panel every second until the user presses q."""
    import curses
    import time

    try:
        curses.curs_set(0)
    except curses.error:
        pass
    while True:
        stdscr.clear()
        for row, line in enumerate(render_lines(queue.snapshot(), int(time.time()))):
            try:
                stdscr.addstr(row, 0, line)
            except curses.error:
                break
        stdscr.refresh()
        stdscr.timeout(REFRESH_MS)
        key = stdscr.getch()
        if key in (ord("q"), ord("Q")):
            break