"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`tyrant.protocol` so the protocol remains
transport-agnostic: a transport moves bytes, in order, and knows nothing
about frames.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..protocol.constants import Status
from ..protocol.errors import TyrantError


# Transport agnostic exceptions

class TransportError(TyrantError):
    """Base class for all transport-layer errors."""

    status = Status.MISCELLANEOUS


class TransportHostError(TransportError):
    """The server's host name could not be resolved."""

    status = Status.HOST_NOT_FOUND


class TransportConnectionError(TransportError):
    """The transport could not establish a connection."""

    status = Status.CONNECTION_REFUSED


class TransportSendError(TransportError):
    """Bytes could not be written to the connection."""

    status = Status.SEND_ERROR


class TransportReceiveError(TransportError):
    """Bytes could not be read from the connection."""

    status = Status.RECEIVE_ERROR


class TransportTimeout(TransportReceiveError):
    """No bytes arrived within the configured timeout."""


class Transport(ABC):
    """Minimal contract for a byte-stream transport."""

    def __init__(self, host: str, port: int, timeout: Optional[float] = None):
        self.host = host
        self.port = int(port)

        # A zero timeout means no timeout at all.
        if not timeout:
            timeout = None
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.host}:{self.port})"

    @abstractmethod
    def open(self) -> None:
        """Establish the underlying connection."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection."""

    @abstractmethod
    def send(self, data: bytes) -> None:
        """Send all of *data*, in order."""

    @abstractmethod
    def recv(self) -> bytes:
        """Return the next available bytes; an empty result means the remote
        end closed the connection."""

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False
