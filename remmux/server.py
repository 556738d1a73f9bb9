"""Listening server that gives every client session its own shell."""

from __future__ import annotations

import argparse
import logging
import socket
from typing import Sequence

from .protocol import DEFAULT_PORT, Command, ProtocolError, recv_command
from .session import Session
from .shell import Shell

log = logging.getLogger(__name__)

BACKLOG = 5


class Server:
    """Accepts connections and starts a session for each one that asks."""

    def __init__(self, port: int = DEFAULT_PORT, host: str = "0.0.0.0") -> None:
        self.sessions: list[Session] = []
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self._sock.bind((host, port))
        except OSError:
            self._sock.close()
            raise

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def address(self) -> tuple[str, int]:
        return self._sock.getsockname()

    def serve(self) -> None:
        """Accept connections until a client asks the server to shut down."""
        self._sock.listen(BACKLOG)
        while True:
            try:
                conn, peer = self._sock.accept()
            except OSError as exc:
                if self._sock.fileno() == -1:
                    return
                log.warning("error accepting a connection: %s", exc)
                continue
            log.info("new connection from %s:%s", *peer[:2])
            if not self.handle_connection(conn):
                return

    def handle_connection(self, conn: socket.socket) -> bool:
        """Act on a new connection's first command; False means stop serving."""
        try:
            command = recv_command(conn)
        except (OSError, ProtocolError) as exc:
            log.debug("connection dropped: %s", exc)
            conn.close()
            return True
        if command is Command.CREATE_SESSION:
            log.info("new session")
            session = Session(conn, Shell())
            session.start()
            self.sessions.append(session)
            return True
        conn.close()
        if command is Command.INITIATE_SHUTDOWN:
            for session in self.sessions:
                session.shutdown()
            return False
        return True

    def close(self) -> None:
        """Shut down every session and stop listening."""
        for session in self.sessions:
            session.shutdown()
        self.sessions.clear()
        self._sock.close()


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="remmux-server", description="Serve remote shell sessions."
    )
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    with Server(args.port, args.host) as server:
        try:
            server.serve()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())