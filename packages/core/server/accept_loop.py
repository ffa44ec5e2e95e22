"""
Sequential status server.

One client at a time: accept, build a snapshot, write one line, close.
Nothing is read from the client.
"""

from __future__ import annotations

import logging
import socket
from typing import Tuple

from packages.core.status.service import StatusService

log = logging.getLogger(__name__)


def _is_closed(sock: socket.socket) -> bool:
    return sock.fileno() == -1


class StatusServer:
    def __init__(
        self,
        service: StatusService,
        host: str = "0.0.0.0",
        port: int = 1234,
        backlog: int = 3,
        send_timeout: float = 5.0,
    ) -> None:
        self._service = service
        self._host = host
        self._port = port
        self._backlog = backlog
        self._send_timeout = send_timeout

    def open(self) -> socket.socket:
        """Create, bind and listen. Raises OSError on failure."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self._host, self._port))
            log.info("Bind successful")
            sock.listen(self._backlog)
        except OSError:
            sock.close()
            raise
        host, port = sock.getsockname()[:2]
        log.info("Listening on %s:%d", host, port)
        return sock

    def serve_forever(self, listener: socket.socket) -> None:
        """Serve until ``listener`` is closed (e.g. by a signal handler)."""
        while not _is_closed(listener):
            self.serve_one(listener)
        log.info("Listening socket closed, accept loop stopped")

    def serve_one(self, listener: socket.socket) -> bool:
        """Accept and answer one client. Returns False if accept failed."""
        try:
            conn, addr = listener.accept()
        except OSError as e:
            if not _is_closed(listener):
                log.warning("Accept failed, continuing: %s", e)
            return False

        with conn:
            self.handle(conn, addr)
        log.info("Client disconnected")
        return True

    def handle(self, conn: socket.socket, addr: Tuple[str, int]) -> None:
        log.info("Client accepted from %s", addr[0])
        line = self._service.status_line()
        try:
            conn.settimeout(self._send_timeout)
            conn.sendall(line.encode("utf-8"))
        except OSError as e:
            log.warning("Send failed: %s", e)
            return
        log.info("Message sent: %s", line.rstrip("\n"))
