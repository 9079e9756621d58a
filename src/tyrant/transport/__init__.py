"""Transport layer implementations."""

from .base import (
    Transport,
    TransportError,
    TransportHostError,
    TransportConnectionError,
    TransportSendError,
    TransportReceiveError,
    TransportTimeout,
)
from .tcp import TCPTransport
from .zmq import StreamTransport


backends = {
    "tcp": TCPTransport,
    "zmq": StreamTransport,
}


def create(backend, host, port, timeout=None):
    """Instantiate, but do not open, a transport of the named *backend*."""

    try:
        cls = backends[backend]
    except KeyError:
        raise ValueError(f"unknown transport backend: {backend!r}") from None

    return cls(host, port, timeout)
