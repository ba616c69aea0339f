"""Command-line client that submits one job and prints the server's progress."""

from __future__ import annotations

import socket
import sys
from typing import Iterator

PORT = 8888
DEFAULT_HOST = "127.0.0.1"
BUFFER_SIZE = 256


def build_request(description: str, priority: object) -> str:
    """Request line for a job, cut to what the server reads in one go."""
    line = f"{description}; priority={priority}"
    return line.encode("utf-8")[: BUFFER_SIZE - 1].decode("utf-8", errors="ignore")


def request_job(
    description: str, priority: object, host: str = DEFAULT_HOST, port: int = PORT
) -> Iterator[str]:
    """Send a job request and yield each line the server sends back."""
    with socket.create_connection((host, port)) as sock:
        sock.sendall(build_request(description, priority).encode("utf-8"))
        with sock.makefile("r", encoding="utf-8", errors="replace") as stream:
            for line in stream:
                yield line.rstrip("\n")


def _usage(program: str) -> None:
    print(f'使用方式：{program} "<job_description>" <priority> [server_ip]')
    print(
        f'範例：{program} "REQUEST job=material_delivery; from=storage; to=station1" 2 [192.168.x.x]'
    )


def main(argv: list[str] | None = None) -> int:
    """Submit a job given on the command line and print the progress."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) < 2:
        _usage("amrdispatch-client")
        return 1
    description, priority = args[0], args[1]
    host = args[2] if len(args) >= 3 else DEFAULT_HOST
    try:
        for line in request_job(description, priority, host):
            print(f"[Server] {line}")
    except OSError as exc:
        print(f"connect: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())