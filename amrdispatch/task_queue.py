"""Priority queue of AMR tasks shared between the accept loop and the dispatcher."""

from __future__ import annotations

import bisect
import enum
import threading
import time
from dataclasses import dataclass, field
from typing import Any


def _now() -> int:
    return int(time.time())


class TaskStatus(enum.Enum):
    """Lifecycle state of a task."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(eq=False)
class Task:
    """A job request from one client, with its timing information in whole seconds."""

    task_id: int
    client_id: int
    priority: int
    job_desc: str
    conn: Any = None
    status: TaskStatus = TaskStatus.PENDING
    created_at: int = field(default_factory=_now)
    wait_start_time: int = field(default_factory=_now)
    start_time: int = 0
    end_time: int = 0


class TaskQueue:
    """Thread-safe queue ordered by priority; a lower number runs first.

    Tasks with equal priority keep the order in which they were enqueued.
    """

    def __init__(self) -> None:
        self._tasks: list[Task] = []
        self._cond = threading.Condition()

    def enqueue(self, task: Task) -> None:
        """Reset the task's timing, mark it pending and insert it by priority."""
        with self._cond:
            task.wait_start_time = _now()
            task.start_time = 0
            task.end_time = 0
            task.status = TaskStatus.PENDING
            index = bisect.bisect_right(self._tasks, task.priority, key=lambda t: t.priority)
            self._tasks.insert(index, task)
            self._cond.notify()

    def dequeue(self, timeout: float | None = None) -> Task | None:
        """Remove and return the most urgent task, marking it running.

        Blocks until a task is available; returns None if ``timeout`` seconds
        pass first.
        """
        with self._cond:
            if not self._cond.wait_for(lambda: self._tasks, timeout=timeout):
                return None
            task = self._tasks.pop(0)
            task.status = TaskStatus.RUNNING
            task.start_time = _now()
            return task

    def snapshot(self) -> list[Task]:
        """Return the queued tasks in dispatch order."""
        with self._cond:
            return list(self._tasks)

    def clear(self) -> None:
        """Drop every queued task."""
        with self._cond:
            self._tasks.clear()

    def __len__(self) -> int:
        with self._cond:
            return len(self._tasks)