"""One client connection served by its own shell."""

from __future__ import annotations

import logging
import select
import socket
import threading
import time

from .protocol import (
    Command,
    ProtocolError,
    recv_command,
    recv_frame,
    send_command,
    send_frame,
)
from .shell import Shell

log = logging.getLogger(__name__)

CLIENT_TIMEOUT = 15.0
POLL_INTERVAL = 1.0


def _until_nul(data: bytes) -> bytes:
    return data.split(b"\0", 1)[0]


class Session:
    """Answers a client's commands, relaying its input to a shell."""

    def __init__(
        self,
        sock: socket.socket,
        shell: Shell | None = None,
        timeout: float = CLIENT_TIMEOUT,
    ) -> None:
        self.sock = sock
        self.shell = shell if shell is not None else Shell()
        self.timeout = timeout
        self.last_message = time.monotonic()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._release_lock = threading.Lock()
        self._released = False

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Serve the client in a background thread."""
        if self._thread is not None:
            raise RuntimeError("session already started")
        self._thread = threading.Thread(
            target=self.run, name="remmux-session", daemon=True
        )
        self._thread.start()

    def run(self) -> None:
        """Serve the client until it asks to stop, goes quiet or disconnects."""
        self.last_message = time.monotonic()
        poll = min(POLL_INTERVAL, self.timeout)
        try:
            while not self._stop.is_set():
                if time.monotonic() - self.last_message > self.timeout:
                    log.info("client timed out, shutting down")
                    break
                readable, _, _ = select.select([self.sock], [], [], poll)
                if not readable:
                    continue
                command = recv_command(self.sock)
                if command is Command.INITIATE_SHUTDOWN:
                    break
                if command is Command.HEARTBEAT:
                    self.handle_heartbeat()
                elif command is Command.STREAM:
                    self.last_message = time.monotonic()
                    self.handle_stream()
        except (OSError, ValueError, ProtocolError) as exc:
            log.debug("session ended: %s", exc)
        finally:
            self._stop.set()
            self._release()

    def handle_stream(self) -> None:
        """Swap the client's input for whatever the shell has written."""
        send_command(self.sock, Command.STREAM)
        received = _until_nul(recv_frame(self.sock))
        if received:
            log.debug("received %r", received)
        send_frame(self.sock, _until_nul(self.shell.read_output()))
        if received:
            self.shell.feed(received)

    def handle_heartbeat(self) -> None:
        """Answer a heartbeat."""
        send_command(self.sock, Command.HEARTBEAT)

    def shutdown(self) -> None:
        """Stop serving and release the socket and the shell."""
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        self._release()

    def _release(self) -> None:
        with self._release_lock:
            if self._released:
                return
            self._released = True
        self.sock.close()
        self.shell.close()