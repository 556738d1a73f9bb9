import socket
import sys
import threading
import time

import pytest

from remmux.protocol import Command, recv_command, recv_frame, send_command, send_frame
from remmux.server import Server, main


@pytest.fixture
def server():
    srv = Server(0, "127.0.0.1")
    yield srv
    srv.close()


def _stream(sock, data):
    send_command(sock, Command.STREAM)
    assert recv_command(sock) is Command.STREAM
    send_frame(sock, data)
    return recv_frame(sock)


def test_unknown_first_command_closes_connection(server):
    a, b = socket.socketpair()
    with b:
        b.sendall(b"\x7f")
        assert server.handle_connection(a) is True
        assert server.sessions == []
        assert b.recv(1) == b""


def test_create_session_starts_session(server):
    a, b = socket.socketpair()
    with b:
        send_command(b, Command.CREATE_SESSION)
        assert server.handle_connection(a) is True
        assert len(server.sessions) == 1
        send_command(b, Command.HEARTBEAT)
        assert recv_command(b) is Command.HEARTBEAT


def test_shutdown_command_stops_sessions(server):
    a, b = socket.socketpair()
    c, d = socket.socketpair()
    with b, d:
        send_command(b, Command.CREATE_SESSION)
        server.handle_connection(a)
        send_command(d, Command.INITIATE_SHUTDOWN)
        assert server.handle_connection(c) is False
        assert all(not session.running for session in server.sessions)
        assert b.recv(1) == b""


def test_serve_end_to_end(server):
    port = server.address[1]
    thread = threading.Thread(target=server.serve, daemon=True)
    thread.start()
    with socket.create_connection(("127.0.0.1", port), timeout=10) as client:
        send_command(client, Command.CREATE_SESSION)
        _stream(client, f"{sys.executable} -c print(42)\n".encode())
        collected = b""
        deadline = time.monotonic() + 15
        while b"42" not in collected and time.monotonic() < deadline:
            collected += _stream(client, b"")
            time.sleep(0.05)
        assert b"42" in collected
    with socket.create_connection(("127.0.0.1", port), timeout=10) as control:
        send_command(control, Command.INITIATE_SHUTDOWN)
    thread.join(15)
    assert not thread.is_alive()


def test_port_in_use_raises():
    holder = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    with holder:
        holder.bind(("127.0.0.1", 0))
        holder.listen(1)
        with pytest.raises(OSError):
            Server(holder.getsockname()[1], "127.0.0.1")


def test_main_rejects_bad_port():
    with pytest.raises(SystemExit) as excinfo:
        main(["--port", "not-a-number"])
    assert excinfo.value.code == 2