"""Drive a local shell straight from the terminal, one key at a time."""

from __future__ import annotations

import argparse
import curses
from typing import Sequence

from .shell import Shell

KEY_TIMEOUT_MS = 250


def run_console(screen, shell: Shell) -> None:
    """Feed key presses to the shell and print its output until it closes."""
    while True:
        key = screen.getch()
        if shell.closed:
            break
        if 0 <= key <= 0xFF:
            shell.feed(bytes([key]))
        output = shell.read_output()
        if output:
            text = output.split(b"\0", 1)[0].decode("utf-8", errors="replace")
            try:
                screen.addstr(text)
            except curses.error:
                pass


def _run(screen) -> None:
    screen.keypad(True)
    curses.noecho()
    screen.timeout(KEY_TIMEOUT_MS)
    with Shell() as shell:
        try:
            run_console(screen, shell)
        except KeyboardInterrupt:
            pass


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="remmux-shell", description="Try the session shell on this terminal."
    )
    parser.parse_args(argv)
    curses.wrapper(_run)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())