"""A pane on the client screen bound to one server session."""

from __future__ import annotations

import curses
import socket
from collections import deque

from .protocol import (
    BUFFER_SIZE,
    Command,
    ProtocolError,
    WindowDesc,
    recv_command,
    recv_frame,
    send_command,
    send_frame,
)

PRINTABLE = range(32, 127)
NEWLINE = ord("\n")


class LineBuffer:
    """The line being typed into a pane, waiting for its newline."""

    def __init__(self, capacity: int = BUFFER_SIZE - 1) -> None:
        self.capacity = capacity
        self._chars: list[str] = []

    def __len__(self) -> int:
        return len(self._chars)

    @property
    def text(self) -> str:
        return "".join(self._chars)

    def push(self, char: str) -> bool:
        """Append one character; False when the line is full."""
        if len(char) != 1:
            raise ValueError("push takes exactly one character")
        if len(self._chars) >= self.capacity:
            return False
        self._chars.append(char)
        return True

    def backspace(self) -> bool:
        """Drop the last character; False when the line is empty."""
        if not self._chars:
            return False
        self._chars.pop()
        return True

    def take(self) -> str:
        """Return the line and start a new one."""
        text = self.text
        self._chars.clear()
        return text


class Pane:
    """Shows a remote shell in a boxed window and forwards typed lines to it."""

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock
        self.desc = WindowDesc()
        self.buffer = LineBuffer()
        self._keys: deque[int] = deque()
        self._frame = None
        self._tty = None
        send_command(sock, Command.CREATE_SESSION)

    def __enter__(self) -> Pane:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def exchange(self, data: bytes = b"") -> bytes:
        """Send input to the session and return the output it has ready."""
        send_command(self.sock, Command.STREAM)
        reply = recv_command(self.sock)
        if reply is not Command.STREAM:
            raise ProtocolError(f"expected a stream reply, got {reply!r}")
        send_frame(self.sock, data)
        return recv_frame(self.sock)

    def set_geometry(self, desc: WindowDesc) -> None:
        self.desc = desc

    def redraw(self) -> None:
        """Recreate the framed window and the terminal area inside it."""
        d = self.desc
        for window in (self._frame, self._tty):
            if window is not None:
                window.erase()
        self._frame = curses.newwin(d.height, d.width, d.y, d.x)
        self._frame.box()
        self._tty = curses.newwin(d.height - 2, d.width - 2, d.y + 1, d.x + 1)
        self._tty.scrollok(True)
        self.refresh()

    def refresh(self) -> None:
        if self._frame is None or self._tty is None:
            return
        self._frame.noutrefresh()
        self._tty.noutrefresh()
        curses.doupdate()

    def focus(self) -> tuple[int, int]:
        """Screen position of this pane's cursor."""
        y, x = self._tty.getyx() if self._tty is not None else (0, 0)
        return self.desc.y + y + 1, self.desc.x + x + 1

    def feed_key(self, key: int) -> None:
        """Queue a key for the next step."""
        self._keys.append(key)

    def step(self) -> str:
        """Handle one queued key, poll the session and show its output."""
        key = self._keys.popleft() if self._keys else None
        if key == NEWLINE:
            output = self.exchange((self.buffer.take() + "\n").encode("ascii"))
            self._write("\n")
        elif key == curses.KEY_BACKSPACE:
            self._erase_char()
            output = b""
        elif key is not None and key in PRINTABLE:
            output = self.exchange(b"")
            if self.buffer.push(chr(key)):
                self._write(chr(key))
        else:
            output = self.exchange(b"")
        text = output.split(b"\0", 1)[0].decode("utf-8", errors="replace")
        if text:
            self._write(text)
        self.refresh()
        return text

    def close(self) -> None:
        self.sock.close()

    def _erase_char(self) -> None:
        if self._tty is None:
            self.buffer.backspace()
            return
        y, x = self._tty.getyx()
        if x > 0:
            self._tty.move(y, x - 1)
            self._write(" ")
            self._tty.move(y, x - 1)
            self.buffer.backspace()

    def _write(self, text: str) -> None:
        if self._tty is None:
            return
        try:
            self._tty.addstr(text)
        except curses.error:
            pass