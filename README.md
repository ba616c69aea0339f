# amrdispatch

A small job dispatcher for autonomous mobile robots (AMRs). Clients send job
requests over TCP. The server queues them by priority and runs them against
limited pools of robots. It streams progress lines back to the client.

## Jobs

A request is one line of plain text:

```
REQUEST job=material_delivery; from=storage; to=station1; priority=2
REQUEST job=intermediate_transfer; from=station1; to=station2; priority=1
REQUEST job=sample_collection; source=line3; priority=5
```

- `material_delivery` and `intermediate_transfer` use the cargo pool, which has
  three robots. These jobs go into a priority queue, where a lower number runs
  first. Jobs with the same priority run in the order they arrived. One
  dispatcher thread takes them off the queue one at a time.
- `sample_collection` uses the single QC robot. It is handled on the client's
  own connection thread and waits until that robot is free.
- A request without `priority=` gets priority 5.
- Any other job gets an `[Error]` line and is cancelled.

Each job reports that it is waiting for a robot. It then reports its steps,
with a pause of `step_seconds` (10 by default) between them. It ends with a
summary line that gives the time spent waiting, the time spent running and the
total, in seconds. Every line sent to a client starts with `[Client<id>]`. The
server also prints each line to its own output, prefixed with `[ServerLog]`.

The server reads one request per connection, up to 255 bytes. It closes the
connection when the job is done.

## Running

Install the package:

```
pip install .
```

Start the server:

```
amrdispatch-server
amrdispatch-server --host 127.0.0.1 --port 9000 --no-monitor
```

By default the server listens on all interfaces, on port 8888. When its output
is a terminal, it shows a curses panel that lists the queued cargo tasks and
refreshes every second. Press `q` to close the panel. Use `--no-monitor` to
run without it. Press Ctrl-C to stop the server. Stopping drops any tasks that
are still queued and closes their connections.

Submit a job. Give the description, the priority and, optionally, the server
address. The address defaults to `127.0.0.1`, and the port is always 8888:

```
amrdispatch-client "REQUEST job=material_delivery; from=storage; to=station1" 2
amrdispatch-client "REQUEST job=sample_collection; source=line3" 1 192.168.0.10
```

The client adds `; priority=<priority>` to the description. It then prints each
line from the server as `[Server] ...` until the server closes the connection.

## Library use

- `amrdispatch.task_queue`: `TaskQueue` is a thread-safe priority queue of
  `Task` objects. Its methods are `enqueue`, `dequeue(timeout)`, `snapshot`,
  `clear` and `len()`. Each `Task` carries a `TaskStatus`.
- `amrdispatch.jobs`: `parse_job` reads a request into a `JobRequest`.
  `format_summary` gives a finished task's timing line.
  `JobHandler(cargo_slots, qc_slots, step_seconds, log)` runs jobs with
  `handle_job` and reports progress with `send_log`.
- `amrdispatch.monitor`: `status_label`, `format_task` and `render_lines`
  produce the panel text. `run_monitor(queue, stdscr)` draws it in a curses
  window.
- `amrdispatch.server`: `parse_priority` and `is_cargo_job` read requests.
  `Server(host, port, handler, queue)` provides `serve_forever`,
  `dispatch_forever`, `handle_client` and `close`, and can be used as a
  context manager.
- `amrdispatch.client`: `build_request` makes a request line.
  `request_job(description, priority, host, port)` sends it and yields the
  reply lines.

## What it does not do

- Robots are simulated with timed pauses. Nothing talks to real hardware.
- Tasks are kept in memory only. Nothing is stored between runs.
- A queued task cannot be cancelled or reprioritised once it has been
  submitted.
- The monitor panel shows only queued cargo tasks. It does not show tasks that
  are running or finished.

## Tests

```
pip install .[test]
pytest
```