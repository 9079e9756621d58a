import itertools
import socketserver
import struct
import threading
import time

import pytest

import tyrant
from tyrant.transport import Transport, TransportTimeout


class ScriptedTransport(Transport):
    """ An in-memory transport. Each sent frame releases the next scripted
        reply into the receive stream; a reply of None releases nothing, and
        an exception instance is raised from send() instead. The stream is
        handed out in chunks of the given size(s), so tests can control how
        responses are fragmented.
    """

    def __init__(self, replies=(), chunk=None, preload=False, timeout=2.0):

        Transport.__init__(self, 'scripted', 0)

        self.replies = list(replies)
        self.sent = list()
        self.stream = bytearray()
        self.condition = threading.Condition()
        self.opened = True
        self.opens = 0
        self.recv_timeout = timeout
        self.eof = False

        if chunk is None:
            self.chunks = None
        elif isinstance(chunk, int):
            self.chunks = itertools.repeat(chunk)
        else:
            self.chunks = itertools.cycle(chunk)

        if preload:
            for reply in self.replies:
                if isinstance(reply, bytes):
                    self.stream += reply
            self.replies = list()


    def open(self):
        with self.condition:
            self.opened = True
            self.opens += 1


    def close(self):
        with self.condition:
            self.opened = False
            self.condition.notify_all()


    def send(self, data):
        with self.condition:
            reply = None
            if self.replies:
                reply = self.replies.pop(0)

            if isinstance(reply, Exception):
                raise reply

            self.sent.append(bytes(data))

            if reply is not None:
                self.stream += reply
                self.condition.notify_all()


    def release(self, data):
        with self.condition:
            self.stream += data
            self.condition.notify_all()


    def recv(self):
        with self.condition:
            ready = self.condition.wait_for(lambda: self.stream or not self.opened or self.eof,
                                            self.recv_timeout)
            if not ready:
                raise TransportTimeout('scripted transport timed out')

            if not self.stream:
                return b''

            if self.chunks is None:
                size = len(self.stream)
            else:
                size = next(self.chunks)

            data = bytes(self.stream[:size])
            del self.stream[:size]
            return data


    @property
    def is_open(self):
        return self.opened


# end of class ScriptedTransport



class HeldTransport(ScriptedTransport):
    """ A :class:`ScriptedTransport` that stalls inside its *hold_at*-th
        is_open check until :attr:`gate` is set, so a test can act while
        the pipeline sits at that exact point. :attr:`holding` is set once
        the stall begins.
    """

    def __init__(self, replies=(), hold_at=1, **kwargs):

        ScriptedTransport.__init__(self, replies, **kwargs)

        self.hold_at = hold_at
        self.checks = 0
        self.holding = threading.Event()
        self.gate = threading.Event()


    @property
    def is_open(self):

        self.checks += 1

        if self.checks == self.hold_at:
            self.holding.set()
            self.gate.wait(5)

        return self.opened


# end of class HeldTransport


def wait_for(predicate, timeout=2.0):
    """ Poll until *predicate* returns True; fail the test otherwise. """

    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return
        time.sleep(0.005)

    raise AssertionError('condition not met within %.1f sec' % (timeout))


# Reply builders, mirroring the server side of the wire format.

def ack(code=0):
    return bytes((code,))


def blob(data, code=0):
    return bytes((code,)) + struct.pack('>I', len(data)) + data


def elements(*items, code=0):
    reply = bytes((code,)) + struct.pack('>I', len(items))
    for item in items:
        reply += struct.pack('>I', len(item)) + item
    return reply


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """ Keep the developer's own settings out of the tests. """

    monkeypatch.setenv('TYRANT_HOME', str(tmp_path))
    for name in ('HOST', 'PORT', 'TIMEOUT', 'TRANSPORT', 'ENCODING'):
        monkeypatch.delenv('TYRANT_' + name, raising=False)

    tyrant.config.clear()
    yield
    tyrant.config.clear()


class _TyrantHandler(socketserver.StreamRequestHandler):
    """ Just enough of a server to exercise the real transports: put, putnr
        and get on an in-memory dictionary.
    """

    def _read(self, count):
        data = self.rfile.read(count)
        if len(data) != count:
            raise EOFError()
        return data


    def handle(self):

        store = self.server.store

        while True:
            try:
                magic, opcode = self._read(2)
            except (EOFError, ValueError):
                return

            if opcode in (0x10, 0x18):
                ksiz, vsiz = struct.unpack('>II', self._read(8))
                key = self._read(ksiz)
                store[key] = self._read(vsiz)
                if opcode == 0x10:
                    self.wfile.write(ack())

            elif opcode == 0x30:
                ksiz, = struct.unpack('>I', self._read(4))
                key = self._read(ksiz)
                try:
                    value = store[key]
                except KeyError:
                    self.wfile.write(ack(7))
                else:
                    self.wfile.write(blob(value))

            else:
                return


@pytest.fixture
def tyrant_server():

    server = socketserver.ThreadingTCPServer(('127.0.0.1', 0), _TyrantHandler)
    server.daemon_threads = True
    server.store = dict()

    thread = threading.Thread(target=server.serve_forever)
    thread.daemon = True
    thread.start()

    yield server

    server.shutdown()
    server.server_close()

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
