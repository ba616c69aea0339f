"""TCP server that accepts job requests and runs them on robot pools."""

from __future__ import annotations

import argparse
import itertools
import re
import socket
import sys
import threading

from .jobs import JobHandler
from .task_queue import Task, TaskQueue

PORT = 8888
MAX_CLIENTS = 10
BUFFER_SIZE = 256
DEFAULT_PRIORITY = 5
_CARGO_JOBS = ("material_delivery", "intermediate_transfer")
_PRIORITY_RE = re.compile(r"priority=\s*([+-]?\d+)")
_POLL_SECONDS = 0.5


def parse_priority(request: str) -> int:
    """Priority from the first ``priority=N`` in a request, or the default."""
    index = request.find("priority=")
    if index < 0:
        return DEFAULT_PRIORITY
    match = _PRIORITY_RE.match(request, index)
    return int(match.group(1)) if match else DEFAULT_PRIORITY


def is_cargo_job(request: str) -> bool:
    """Whether the request goes through the shared cargo queue."""
    return any(job in request for job in _CARGO_JOBS)


class Server:
    """Accepts clients, queues cargo jobs by priority and runs other jobs at once."""

    def __init__(
        self,
        host: str = "",
        port: int = PORT,
        handler: JobHandler | None = None,
        queue: TaskQueue | None = None,
    ) -> None:
        self.handler = handler or JobHandler()
        self.queue = queue if queue is not None else TaskQueue()
        self._closed = threading.Event()
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            self._sock.bind((host, port))
            self._sock.listen(MAX_CLIENTS)
        except OSError:
            self._sock.close()
            raise
        self._sock.settimeout(_POLL_SECONDS)
        self.port = self._sock.getsockname()[1]

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def serve_forever(self) -> None:
        """Accept clients until closed, each handled on its own thread."""
        for client_id in itertools.count(1):
            while True:
                if self._closed.is_set():
                    return
                try:
                    conn, _ = self._sock.accept()
                    break
                except TimeoutError:
                    continue
                except OSError:
                    if self._closed.is_set():
                        return
                    raise
            threading.Thread(
                target=self.handle_client, args=(conn, client_id), daemon=True
            ).start()

    def handle_client(self, conn: socket.socket, client_id: int) -> None:
        """Read one request from a client and queue or run it."""
        try:
            data = conn.recv(BUFFER_SIZE - 1)
        except OSError:
            data = b""
        if not data:
            conn.close()
            return
        request = data.decode("utf-8", errors="replace")
        task = Task(
            task_id=client_id,
            client_id=client_id,
            priority=parse_priority(request),
            job_desc=request,
            conn=conn,
        )
        if is_cargo_job(request):
            self.queue.enqueue(task)
            return
        try:
            self.handler.handle_job(task)
        finally:
            conn.close()

    def dispatch_forever(self) -> None:
        """Run queued cargo tasks one at a time until closed."""
        while not self._closed.is_set():
            task = self.queue.dequeue(timeout=_POLL_SECONDS)
            if task is None:
                continue
            try:
                self.handler.handle_job(task)
            finally:
                if task.conn is not None:
                    task.conn.close()

    def close(self) -> None:
        """Stop accepting, stop dispatching and drop queued tasks."""
        self._closed.set()
        self._sock.close()
        for task in self.queue.snapshot():
            if task.conn is not None:
                task.conn.close()
        self.queue.clear()


def _start_monitor(queue: TaskQueue) -> None:
    import curses

    from .monitor import run_monitor

    threading.Thread(target=curses.wrapper, args=(run_monitor, queue), daemon=True).start()


def main(argv: list[str] | None = None) -> int:
    """Run the job server until interrupted."""
    parser = argparse.ArgumentParser(description="AMR job dispatch server")
    parser.add_argument("--host", default="")
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--no-monitor", action="store_true", help="do not show the queue panel")
    args = parser.parse_args(argv)

    try:
        server = Server(args.host, args.port)
    except OSError as exc:
        print(f"bind: {exc}", file=sys.stderr)
        return 1

    threading.Thread(target=server.dispatch_forever, daemon=True).start()
    if not args.no_monitor and sys.stdout.isatty():
        _start_monitor(server.queue)
    print(f"Server listening on port {server.port}...", flush=True)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.close()
        print("\n[Server] 資源已釋放，關閉服務")
    return 0


if __name__ == "__main__":
    sys.exit(main())