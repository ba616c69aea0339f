"""Priority dispatcher for AMR jobs submitted over TCP, with a client and a curses monitor."""

__version__ = "0.1.0"
__all__ = ["task_queue", "jobs", "monitor", "server", "client"]