"""ZeroMQ transport, using a STREAM socket to speak raw TCP."""

from .stream import StreamTransport
