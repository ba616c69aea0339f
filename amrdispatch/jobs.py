"""Parsing and execution of AMR job requests."""

from __future__ import annotations

import re
import sys
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from .task_queue import Task, TaskStatus

_REQUEST_RE = re.compile(
    r"REQUEST\s*job=(?P<job>[^;]+)"
    r"(?:;\s*(?:from=(?P<origin>[^;]+)(?:;\s*to=(?P<destination>\S+))?"
    r"|source=(?P<source>\S+)))?"
)


@dataclass(frozen=True)
class JobRequest:
    """Fields parsed from a request line; missing ones are empty strings."""

    job: str = ""
    origin: str = ""
    destination: str = ""
    source: str = ""


def parse_job(description: str) -> JobRequest:
    """Parse ``REQUEST job=...; from=...; to=...`` or ``REQUEST job=...; source=...``."""
    match = _REQUEST_RE.match(description)
    if match is None:
        return JobRequest()
    return JobRequest(**{name: value or "" for name, value in match.groupdict().items()})


def format_summary(task: Task) -> str:
    """Describe how long a finished task waited and ran."""
    waited = task.start_time - task.wait_start_time
    ran = task.end_time - task.start_time
    total = task.end_time - task.wait_start_time
    return f"[Summary] 任務ID={task.task_id} 等待={waited}s 執行={ran}s 總共={total}s"


@dataclass(frozen=True)
class _Procedure:
    pool: str
    waiting: str
    started: tuple[str, ...]
    midway: str
    finished: str


_PROCEDURES = {
    "material_delivery": _Procedure(
        "cargo",
        "[Cargo] 等待可用資源...",
        ("[Cargo] 已取得資源，開始執行物料配送...", "[Cargo] 裝載物料中..."),
        "[Cargo] 運送中...",
        "[Cargo] 卸料完成！",
    ),
    "intermediate_transfer": _Procedure(
        "cargo",
        "[Transfer] 等待可用資源...",
        ("[Transfer] 已取得資源，開始搬運半成品...", "[Transfer] 開始搬運半成品..."),
        "[Transfer] 運送中...",
        "[Transfer] 已完成中段轉移！",
    ),
    "sample_collection": _Procedure(
        "qc",
        "[QC] 等待可用資源...",
        ("[QC] 已取得資源，開始樣本採集任務...", "[QC] 移動至樣本採集中心中..."),
        "[QC] 進行樣本採集...",
        "[QC] 已完成樣本採集任務！",
    ),
}

_INVALID_MESSAGE = "[Error] 無效的任務參數！"


def _print_log(line: str) -> None:
    print(f"[ServerLog] {line}", flush=True)
    sys.stdout.flush()


class JobHandler:
    """Runs jobs against limited pools of cargo and quality-control robots."""

    def __init__(
        self,
        cargo_slots: int = 3,
        qc_slots: int = 1,
        step_seconds: float = 10,
        log: Callable[[str], None] | None = None,
    ) -> None:
        self._pools = {
            "cargo": threading.BoundedSemaphore(cargo_slots),
            "qc": threading.BoundedSemaphore(qc_slots),
        }
        self.step_seconds = step_seconds
        self._log = log or _print_log

    def send_log(self, conn: Any, message: str, client_id: int) -> None:
        """Log a message for a client and send it over its connection as one line."""
        line = f"[Client{client_id}] {message}"
        self._log(line)
        if conn is None:
            return
        try:
            conn.sendall(line.encode("utf-8") + b"\n")
        except OSError:
            pass

    def handle_job(self, task: Task) -> None:
        """Carry out the task's job, reporting progress to its client."""
        request = parse_job(task.job_desc)
        procedure = _PROCEDURES.get(request.job)
        if procedure is None:
            self.send_log(task.conn, _INVALID_MESSAGE, task.client_id)
            task.status = TaskStatus.CANCELLED
            return
        self._run(task, procedure)

    def _run(self, task: Task, procedure: _Procedure) -> None:
        report = lambda message: self.send_log(task.conn, message, task.client_id)
        report(procedure.waiting)
        with self._pools[procedure.pool]:
            task.status = TaskStatus.RUNNING
            task.start_time = int(time.time())
            for message in procedure.started:
                report(message)
            time.sleep(self.step_seconds)
            report(procedure.midway)
            time.sleep(self.step_seconds)
            report(procedure.finished)
            task.status = TaskStatus.COMPLETED
            task.end_time = int(time.time())
        report(format_summary(task))