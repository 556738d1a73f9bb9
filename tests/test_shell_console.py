import curses
import time
from collections import deque

import pytest

from remmux.shell import Shell
from remmux.shell_console import run_console


class ConsoleScreen:
    def __init__(self, shell, keys, done, limit=500):
        self.shell = shell
        self.keys = deque(keys)
        self.done = done
        self.limit = limit
        self.idle = 0
        self.calls = 0
        self.texts = []

    @property
    def output(self):
        return "".join(self.texts)

    def getch(self):
        self.calls += 1
        if self.keys:
            return self.keys.popleft()
        self.idle += 1
        if self.done(self) or self.idle > self.limit:
            self.shell.close()
        time.sleep(0.01)
        return -1

    def addstr(self, text):
        self.texts.append(text)


@pytest.fixture
def shell():
    sh = Shell()
    yield sh
    sh.close()


def test_command_output_is_shown(shell):
    screen = ConsoleScreen(shell, b"echo hello\n", lambda s: "hello" in s.output)
    run_console(screen, shell)
    assert "hello" in screen.output
    assert shell.history == ["echo hello"]


def test_keys_build_command_line(shell):
    screen = ConsoleScreen(shell, b"true\n", lambda s: True)
    run_console(screen, shell)
    assert shell.history == ["true"]


def test_keys_outside_byte_range_are_ignored(shell):
    keys = [*b"tr", curses.KEY_RESIZE, *b"ue\n"]
    screen = ConsoleScreen(shell, keys, lambda s: True)
    run_console(screen, shell)
    assert shell.history == ["true"]


def test_closed_shell_stops_console(shell):
    shell.close()
    screen = ConsoleScreen(shell, b"ls\n", lambda s: True)
    run_console(screen, shell)
    assert screen.calls == 1
    assert shell.history == []