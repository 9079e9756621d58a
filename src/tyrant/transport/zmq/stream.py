"""ZeroMQ STREAM transport.

A STREAM socket exchanges raw TCP bytes with a peer that knows nothing about
ZeroMQ. Every message is two frames: the routing id of the connection, then
the data. A frame with empty data signals a connect or a disconnect.
"""

from __future__ import annotations

import logging
from typing import Optional

import zmq

from ..base import (
    Transport,
    TransportConnectionError,
    TransportHostError,
    TransportReceiveError,
    TransportSendError,
    TransportTimeout,
)

logger = logging.getLogger(__name__)

zmq_context = zmq.Context.instance()


class StreamTransport(Transport):
    """A single TCP connection to the server, driven through ZeroMQ."""

    # ZeroMQ connects asynchronously and never reports a refused connection;
    # give up if the connect notification does not arrive in time.
    connect_timeout = 5.0

    def __init__(self, host: str, port: int, timeout: Optional[float] = None):
        super().__init__(host, port, timeout)
        self.socket: Optional[zmq.Socket] = None
        self.routing_id: Optional[bytes] = None

    def _milliseconds(self, seconds: Optional[float]) -> Optional[int]:
        if seconds is None:
            return None
        return int(seconds * 1000)

    def open(self) -> None:
        if self.socket is not None:
            return

        server = f"tcp://{self.host}:{self.port}"

        sock = zmq_context.socket(zmq.STREAM)
        sock.setsockopt(zmq.LINGER, 0)

        try:
            sock.connect(server)
        except zmq.ZMQError as e:
            sock.close()
            raise TransportHostError(f"cannot connect to {server}: {e}") from e

        connect_timeout = self.timeout or self.connect_timeout

        if not sock.poll(self._milliseconds(connect_timeout), zmq.POLLIN):
            sock.close()
            raise TransportConnectionError(f"no connection to {server} in {connect_timeout:.2f} sec")

        # The first message on a fresh connection is the empty notification
        # that carries the routing id for all further traffic.
        routing_id, _empty = sock.recv_multipart()

        self.socket = sock
        self.routing_id = routing_id
        logger.debug("connected to %s", server)

    def close(self) -> None:
        sock = self.socket
        self.socket = None

        if sock is None:
            return

        # An empty data frame asks ZeroMQ to drop the TCP connection.
        try:
            sock.send_multipart((self.routing_id, b""), flags=zmq.NOBLOCK)
        except zmq.ZMQError:
            pass

        sock.close()
        self.routing_id = None
        logger.debug("disconnected from %s:%d", self.host, self.port)

    def send(self, data: bytes) -> None:
        if self.socket is None:
            raise TransportSendError("not connected")

        try:
            self.socket.send_multipart((self.routing_id, data))
        except zmq.ZMQError as e:
            raise TransportSendError(f"send to {self.host}:{self.port} failed: {e}") from e

    def recv(self) -> bytes:
        if self.socket is None:
            raise TransportReceiveError("not connected")

        try:
            ready = self.socket.poll(self._milliseconds(self.timeout), zmq.POLLIN)
            if not ready:
                raise TransportTimeout(f"no response in {self.timeout:.2f} sec")

            routing_id, data = self.socket.recv_multipart()
        except zmq.ZMQError as e:
            raise TransportReceiveError(f"receive from {self.host}:{self.port} failed: {e}") from e

        # An empty frame is the disconnect notification, which reads the
        # same as end-of-stream on a plain socket.
        return data

    @property
    def is_open(self) -> bool:
        return self.socket is not None
