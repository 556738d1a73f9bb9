"""Terminal client showing several remote shell sessions side by side."""

from __future__ import annotations

import argparse
import curses
import re
import socket
import sys
from typing import Sequence

from .layout import tile
from .pane import NEWLINE, PRINTABLE, Pane
from .protocol import DEFAULT_PORT, ProtocolError
from .shell import parse_args

CONTROL_A = 1
KEY_TIMEOUT_MS = 250

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


class Client:
    """Routes keys to the focused pane and runs commands typed after Ctrl-A."""

    def __init__(
        self, screen, address: str = "127.0.0.1", port: int = DEFAULT_PORT
    ) -> None:
        self.screen = screen
        self.address = (address, port)
        self.panes: list[Pane] = []
        self.focused = 0
        self.create_pane()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def focused_pane(self) -> Pane:
        return self.panes[self.focused]

    def step(self) -> None:
        """Handle one key press and let every pane talk to its session."""
        key = self.screen.getch()
        if key == curses.KEY_RESIZE:
            self.resize()
        elif key == CONTROL_A:
            self.read_command()
        elif key in PRINTABLE or key in (NEWLINE, curses.KEY_BACKSPACE):
            self.focused_pane.feed_key(key)
        for pane in self.panes:
            pane.step()
        self._move(*self.focused_pane.focus())

    def create_pane(self) -> Pane:
        """Open a new session on the server and give it a pane."""
        sock = socket.create_connection(self.address)
        try:
            pane = Pane(sock)
        except BaseException:
            sock.close()
            raise
        self.panes.append(pane)
        self.resize()
        return pane

    def resize(self) -> None:
        """Lay the panes out again over the whole screen."""
        height, width = self.screen.getmaxyx()
        self.screen.erase()
        for pane, desc in zip(self.panes, tile(len(self.panes), height, width)):
            pane.set_geometry(desc)
            pane.redraw()

    def read_command(self) -> str | None:
        """Read a command on the bottom line, run it and show its message."""
        height, width = self.screen.getmaxyx()
        row = height - 1
        self._put(":", row, 0)
        self._move(row, 1)
        self.screen.clrtoeol()
        chars: list[str] = []
        while (key := self.screen.getch()) != NEWLINE:
            if key in PRINTABLE:
                chars.append(chr(key))
                self._put(chr(key))
                y, x = self.screen.getyx()
                if x >= width - 1:
                    self._move(y, 1)
                    self.screen.clrtoeol()
                    self._move(y, 1)
            elif key == curses.KEY_BACKSPACE:
                y, x = self.screen.getyx()
                if x > 1:
                    self._move(y, x - 1)
                    self._put(" ")
                    self._move(y, x - 1)
                    if chars:
                        chars.pop()
        self._move(row, 0)
        self.screen.clrtoeol()
        message = self.run_command("".join(chars))
        if message:
            self._put(message, row, 0)
        return message

    def run_command(self, line: str) -> str | None:
        """Run a command line; return the message to show, if any."""
        words = parse_args(line)
        if not words:
            return None
        name, *rest = words
        if name == "create":
            self.create_pane()
        elif name == "select":
            index = _atoi(rest[0] if rest else "")
            if 0 <= index < len(self.panes):
                self.focused = index
                return f"Selected {index}"
            return f"Child {index} does not exist!"
        return None

    def close(self) -> None:
        for pane in self.panes:
            pane.close()
        self.panes.clear()

    def _move(self, y: int, x: int) -> None:
        try:
            self.screen.move(y, x)
        except curses.error:
            pass

    def _put(self, text: str, *position: int) -> None:
        try:
            self.screen.addstr(*position, text)
        except curses.error:
            pass


def _run(screen, address: str, port: int) -> None:
    screen.keypad(True)
    curses.noecho()
    screen.timeout(KEY_TIMEOUT_MS)
    with Client(screen, address, port) as client:
        try:
            while True:
                client.step()
        except KeyboardInterrupt:
            pass


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="remmux", description="Show remote shell sessions side by side."
    )
    parser.add_argument("--address", default="127.0.0.1", help="server address")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="server port")
    args = parser.parse_args(argv)
    try:
        curses.wrapper(_run, args.address, args.port)
    except (OSError, ProtocolError) as exc:
        print(f"remmux: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())