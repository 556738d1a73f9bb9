import socket
import struct

import pytest

from remmux.protocol import (
    BUFFER_SIZE,
    Command,
    ProtocolError,
    codes_to_text,
    recv_command,
    recv_exact,
    recv_frame,
    send_command,
    send_frame,
)


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    yield a, b
    a.close()
    b.close()


def test_command_wire_byte(pair):
    a, b = pair
    send_command(a, Command.STREAM)
    assert recv_exact(b, 1) == b"\x04"


@pytest.mark.parametrize("command", list(Command))
def test_command_round_trip(pair, command):
    a, b = pair
    send_command(a, command)
    assert recv_command(b) is command


def test_unknown_command_is_none_and_stream_continues(pair):
    a, b = pair
    a.sendall(b"\x7f")
    send_command(a, Command.HEARTBEAT)
    assert recv_command(b) is None
    assert recv_command(b) is Command.HEARTBEAT


def test_frame_wire_format(pair):
    a, b = pair
    send_frame(a, b"abc")
    assert recv_exact(b, 7) == struct.pack("<i", 3) + b"abc"


@pytest.mark.parametrize("payload", [b"", b"ls -l\n", bytes(range(1, 200))])
def test_frame_round_trip(pair, payload):
    a, b = pair
    send_frame(a, payload)
    assert recv_frame(b) == payload


def test_negative_length_is_empty(pair):
    a, b = pair
    a.sendall(struct.pack("<i", -5))
    send_frame(a, b"next")
    assert recv_frame(b) == b""
    assert recv_frame(b) == b"next"


def test_oversized_incoming_frame_rejected(pair):
    a, b = pair
    a.sendall(struct.pack("<i", BUFFER_SIZE + 1))
    with pytest.raises(ProtocolError):
        recv_frame(b)


def test_oversized_outgoing_frame_rejected(pair):
    a, _ = pair
    with pytest.raises(ProtocolError):
        send_frame(a, b"x" * (BUFFER_SIZE + 1))


def test_largest_frame_round_trip(pair):
    a, b = pair
    payload = b"y" * BUFFER_SIZE
    send_frame(a, payload)
    assert recv_frame(b) == payload


def test_recv_exact_on_closed_peer(pair):
    a, b = pair
    a.sendall(b"ab")
    a.close()
    with pytest.raises(ProtocolError):
        recv_exact(b, 3)


def test_recv_exact_joins_pieces(pair):
    a, b = pair
    a.sendall(b"he")
    a.sendall(b"llo")
    assert recv_exact(b, 5) == b"hello"


def test_codes_to_text_stops_at_zero():
    assert codes_to_text([104, 105, 0, 106]) == "hi"


def test_codes_to_text_without_terminator():
    assert codes_to_text(map(ord, "create")) == "create"