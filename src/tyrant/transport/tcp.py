"""Plain TCP stream transport."""

from __future__ import annotations

import logging
import socket
from typing import Optional

from .base import (
    Transport,
    TransportConnectionError,
    TransportHostError,
    TransportReceiveError,
    TransportSendError,
    TransportTimeout,
)

logger = logging.getLogger(__name__)


class TCPTransport(Transport):
    """A single TCP connection to the server."""

    recv_size = 65536

    def __init__(self, host: str, port: int, timeout: Optional[float] = None):
        super().__init__(host, port, timeout)
        self.socket: Optional[socket.socket] = None

    def open(self) -> None:
        if self.socket is not None:
            return

        address = (self.host, self.port)

        try:
            sock = socket.create_connection(address, self.timeout)
        except socket.gaierror as e:
            raise TransportHostError(f"host not found: {self.host}: {e}") from e
        except socket.timeout as e:
            raise TransportConnectionError(f"connection to {self.host}:{self.port} timed out") from e
        except OSError as e:
            raise TransportConnectionError(f"connection to {self.host}:{self.port} failed: {e}") from e

        # Requests are small and strictly alternate with responses; do not
        # let Nagle hold them back.
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        self.socket = sock
        logger.debug("connected to %s:%d", self.host, self.port)

    def close(self) -> None:
        sock = self.socket
        self.socket = None

        if sock is None:
            return

        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # Already disconnected.
            pass
        sock.close()
        logger.debug("disconnected from %s:%d", self.host, self.port)

    def send(self, data: bytes) -> None:
        if self.socket is None:
            raise TransportSendError("not connected")

        try:
            self.socket.sendall(data)
        except OSError as e:
            raise TransportSendError(f"send to {self.host}:{self.port} failed: {e}") from e

    def recv(self) -> bytes:
        if self.socket is None:
            raise TransportReceiveError("not connected")

        try:
            return self.socket.recv(self.recv_size)
        except socket.timeout as e:
            raise TransportTimeout(f"no response in {self.timeout:.2f} sec") from e
        except OSError as e:
            raise TransportReceiveError(f"receive from {self.host}:{self.port} failed: {e}") from e

    @property
    def is_open(self) -> bool:
        return self.socket is not None
