"""Wire protocol shared by the multiplexer client and server.

Every exchange starts with a one-byte command.  A stream exchange then
carries length-prefixed frames: a four-byte little-endian signed length
followed by that many bytes of payload.
"""

from __future__ import annotations

import enum
import itertools
import socket
import struct
from dataclasses import dataclass
from typing import Iterable

MAX_WINDOWS = 25
BUFFER_SIZE = 10240
DEFAULT_PORT = 8912

_COMMAND = struct.Struct("<b")
_LENGTH = struct.Struct("<i")


class ProtocolError(Exception):
    """Raised when the peer breaks the protocol or closes the connection."""


class Command(enum.IntEnum):
    """Commands that open every exchange."""

    INITIATE_SHUTDOWN = 1
    HEARTBEAT = 2
    CREATE_SESSION = 3
    STREAM = 4


@dataclass
class WindowDesc:
    """Position and size of a window on the terminal."""

    y: int = 0
    x: int = 0
    width: int = 0
    height: int = 0


def codes_to_text(codes: Iterable[int]) -> str:
    """Turn character codes into a string, stopping at the first zero."""
    return "".join(chr(code) for code in itertools.takewhile(bool, codes))


def recv_exact(sock: socket.socket, size: int) -> bytes:
    """Read exactly ``size`` bytes from ``sock``."""
    received = bytearray()
    while len(received) < size:
        chunk = sock.recv(size - len(received))
        if not chunk:
            raise ProtocolError(
                f"connection closed after {len(received)} of {size} bytes"
            )
        received += chunk
    return bytes(received)


def send_command(sock: socket.socket, command: Command) -> None:
    """Send one command byte."""
    sock.sendall(_COMMAND.pack(int(command)))


def recv_command(sock: socket.socket) -> Command | None:
    """Read one command byte; unknown commands come back as None."""
    (value,) = _COMMAND.unpack(recv_exact(sock, _COMMAND.size))
    try:
        return Command(value)
    except ValueError:
        return None


def send_frame(sock: socket.socket, data: bytes) -> None:
    """Send a length-prefixed frame."""
    if len(data) > BUFFER_SIZE:
        raise ProtocolError(f"frame of {len(data)} bytes exceeds {BUFFER_SIZE}")
    sock.sendall(_LENGTH.pack(len(data)) + bytes(data))


def recv_frame(sock: socket.socket) -> bytes:
    """Read a length-prefixed frame; a length of zero or less is empty."""
    (length,) = _LENGTH.unpack(recv_exact(sock, _LENGTH.size))
    if length > BUFFER_SIZE:
        raise ProtocolError(f"frame of {length} bytes exceeds {BUFFER_SIZE}")
    if length <= 0:
        return b""
    return recv_exact(sock, length)