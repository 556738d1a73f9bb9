"""A minimal command shell fed one byte at a time.

Input bytes accumulate into a line; a newline runs the line as a program
with its standard output and error collected for later reading.
"""

from __future__ import annotations

import logging
import queue
import subprocess
import threading
from typing import Iterable

from .protocol import BUFFER_SIZE

log = logging.getLogger(__name__)

MAX_ARGS = 127


def parse_args(line: str) -> list[str]:
    """Split a command line on spaces, dropping empty words."""
    return [word for word in line.split(" ") if word][:MAX_ARGS]


class Shell:
    """Runs command lines fed to it in a background worker."""

    def __init__(self) -> None:
        self.history: list[str] = []
        self._line = bytearray()
        self._output = bytearray()
        self._lock = threading.Lock()
        self._inbox: queue.Queue[bytes | None] = queue.Queue()
        self._closed = False
        self._worker = threading.Thread(
            target=self._loop, name="remmux-shell", daemon=True
        )
        self._worker.start()

    def __enter__(self) -> Shell:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def feed(self, data: bytes) -> None:
        """Queue input bytes for the shell."""
        if self._closed:
            raise ValueError("shell is closed")
        if data:
            self._inbox.put(bytes(data))

    def read_output(self) -> bytes:
        """Take up to one buffer of pending output without waiting."""
        with self._lock:
            chunk = bytes(self._output[:BUFFER_SIZE])
            del self._output[:BUFFER_SIZE]
        return chunk

    def execute(self, args: Iterable[str]) -> int:
        """Run a program, collect its output and return its exit status."""
        argv = list(args)
        if not argv:
            raise ValueError("no program to run")
        log.debug("executing %s", argv[0])
        completed = subprocess.run(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            check=False,
        )
        with self._lock:
            self._output += completed.stdout
        log.debug("finished %s", argv[0])
        return completed.returncode

    def close(self) -> None:
        """Stop the worker once queued input has been handled."""
        if self._closed:
            return
        self._closed = True
        self._inbox.put(None)
        if self._worker is not threading.current_thread():
            self._worker.join()

    def _loop(self) -> None:
        while (data := self._inbox.get()) is not None:
            for byte in data:
                if byte == 0:
                    continue
                if byte == ord("\n"):
                    self._run_line()
                else:
                    self._line.append(byte)

    def _run_line(self) -> None:
        line = self._line.decode("utf-8", errors="replace")
        self._line.clear()
        self.history.append(line)
        args = parse_args(line)
        if not args:
            return
        try:
            self.execute(args)
        except OSError as exc:
            log.debug("could not run %s: %s", args[0], exc)