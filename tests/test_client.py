import socket
import threading

import pytest

from amrdispatch.client import build_request, main, request_job

DEFAULT_PORT = 8888


@pytest.fixture
def fake_server():
    listener = socket.socket()
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)
    received = []

    def serve():
        conn, _ = listener.accept()
        with conn:
            received.append(conn.recv(1024).decode("utf-8"))
            conn.sendall("[Client1] first\n[Client1] 第二\n".encode("utf-8"))

    worker = threading.Thread(target=serve, daemon=True)
    worker.start()
    yield listener.getsockname()[1], received
    worker.join(timeout=5)
    listener.close()


def test_build_request_appends_priority():
    assert build_request("REQUEST job=x", 2) == "REQUEST job=x; priority=2"


def test_build_request_truncated_to_buffer():
    line = build_request("REQUEST job=" + "é" * 300, 1)
    assert len(line.encode("utf-8")) <= 255
    assert line.startswith("REQUEST job=é")


def test_request_job_yields_lines(fake_server):
    port, received = fake_server
    lines = list(request_job("REQUEST job=a", 3, "127.0.0.1", port))
    assert lines == ["[Client1] first", "[Client1] 第二"]
    assert received == [build_request("REQUEST job=a", 3)]


def test_main_prints_server_lines(fake_server, monkeypatch, capsys):
    port, received = fake_server
    original_connect = socket.socket.connect
    targets = []

    def redirect(self, address):
        host, target = address[0], address[1]
        targets.append((host, target))
        if target == DEFAULT_PORT:
            target = port
        return original_connect(self, (host, target))

    monkeypatch.setattr(socket.socket, "connect", redirect)
    assert main(["REQUEST job=a", "4"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["[Server] [Client1] first", "[Server] [Client1] 第二"]
    assert received[0].endswith("; priority=4")
    assert ("127.0.0.1", DEFAULT_PORT) in targets


def test_main_without_arguments_prints_usage(capsys):
    assert main([]) == 1
    assert "使用方式" in capsys.readouterr().out


def test_main_reports_connection_failure(capsys):
    probe = socket.socket()
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    with pytest.raises(OSError):
        list(request_job("REQUEST job=a", 1, "127.0.0.1", port))
    assert main(["REQUEST job=a", "1", "127.0.0.1.invalid"]) == 1
    assert capsys.readouterr().err.startswith("connect:")