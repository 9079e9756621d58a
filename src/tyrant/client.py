""" The caller-facing database classes. :class:`Hash` speaks to a plain
    key/value database; :class:`Table` speaks to a tabular database, where
    each record is a set of named columns, and adds the table functions and
    search queries.

    Every command method returns a :class:`~tyrant.protocol.message.Result`
    once the server has answered. Pass ``wait=False`` to get the queued
    :class:`~tyrant.protocol.message.Task` instead; its
    :func:`~tyrant.protocol.message.Task.wait` method returns the result.
"""

import logging

from . import config
from . import transport as transports
from .pipeline import Pipeline
from .protocol import constants
from .protocol import request
from .protocol import response
from .protocol.constants import Command, Status
from .protocol.errors import ArgumentError
from .protocol.message import Task
from .protocol.query import Query
from .protocol.record import Record

logger = logging.getLogger(__name__)


def _discard(value):
    return None


class Hash:
    """ A connection to a plain key/value database. The *host*, *port*,
        *timeout*, *backend* and *encoding* arguments override the
        configured :mod:`tyrant.config` settings. An already constructed
        *transport* may be supplied instead of a backend name.

        Setting :data:`~tyrant.protocol.constants.TRECON` in *options*
        reopens the connection automatically after a transport failure.

        :ivar encoding: The encoding used to decode returned values to str;
            None if values are returned as bytes. Pass an empty string as
            the *encoding* argument to get bytes.
    """

    def __init__(self, host=None, port=None, timeout=None, backend=None,
                 encoding=None, options=0, transport=None):

        settings = config.settings(host=host, port=port, timeout=timeout,
                                   transport=backend, encoding=encoding)

        self.settings = settings
        self.host = settings.host
        self.port = settings.port
        self.timeout = settings.timeout
        self.encoding = settings.encoding
        self.options = options

        self.transport = transport
        self.pipeline = None


    def __repr__(self):
        return '%s(%s:%d)' % (type(self).__name__, self.host, self.port)


    def __enter__(self):
        return self.open()


    def __exit__(self, *exc):
        self.close()


    @property
    def is_open(self):
        return self.pipeline is not None


    def open(self):
        """ Connect to the server. Failure to connect raises a subclass of
            :class:`~tyrant.transport.TransportError`, whose *status*
            attribute classifies the failure.
        """

        if self.pipeline is not None:
            return self

        if self.transport is None:
            self.transport = transports.create(self.settings.transport,
                                               self.host, self.port, self.timeout)

        self.transport.open()

        reconnect = bool(self.options & constants.TRECON)
        self.pipeline = Pipeline(self.transport, self.encoding, reconnect)
        return self


    def close(self):

        pipeline = self.pipeline
        self.pipeline = None

        if pipeline is not None:
            pipeline.close()


    def submit(self, command, frame, transform=None, wait=True):
        """ Queue an already encoded request *frame* for the :class:`Command`
            *command*. The optional *transform* is applied to the decoded
            value of a successful response.
        """

        if self.pipeline is None:
            task = Task.failed(command, Status.INVALID_OPERATION, 'no active connection')
        else:
            task = Task(command, frame, transform)
            self.pipeline.submit(task)

        return self._deliver(task, wait)


    def _deliver(self, task, wait):
        if wait:
            return task.wait()
        return task


    def _failed(self, command, error, wait):
        """ Arguments could not be encoded: nothing is transmitted. """

        logger.warning('%s: %s', command.name.lower(), error)
        task = Task.failed(command, Status.INVALID_OPERATION, str(error))
        return self._deliver(task, wait)


    def _call(self, command, *args, transform=None, wait=True):

        try:
            frame = request.encode(command, *args)
        except ArgumentError as e:
            return self._failed(command, e, wait)

        return self.submit(command, frame, transform, wait)


    def put(self, key, value, wait=True):
        """ Store a record, overwriting any existing value. """

        return self._call(Command.PUT, key, value, wait=wait)


    def putkeep(self, key, value, wait=True):
        """ Store a record only if the key is not already present; otherwise
            the status is :attr:`Status.EXISTING_RECORD`.
        """

        return self._call(Command.PUTKEEP, key, value, wait=wait)


    def putcat(self, key, value, wait=True):
        """ Append to the end of an existing value. """

        return self._call(Command.PUTCAT, key, value, wait=wait)


    def putshl(self, key, value, width, wait=True):
        """ Append to an existing value, shifting it left so that the result
            is at most *width* bytes long.
        """

        return self._call(Command.PUTSHL, key, value, width, wait=wait)


    def putnr(self, key, value, wait=True):
        """ Store a record without waiting for a response. The server sends
            none, so the result only reflects whether the request was sent.
        """

        return self._call(Command.PUTNR, key, value, wait=wait)


    def out(self, key, wait=True):
        return self._call(Command.OUT, key, wait=wait)


    def get(self, key, wait=True):
        return self._call(Command.GET, key, wait=wait)


    def mget(self, keys, wait=True):
        """ Retrieve several records at once. The value is a dictionary of
            key to :class:`~tyrant.protocol.record.MultiValue`; keys that are
            not present are omitted.
        """

        return self._call(Command.MGET, keys, wait=wait)


    def vsiz(self, key, wait=True):
        return self._call(Command.VSIZ, key, wait=wait)


    def iterinit(self, wait=True):
        return self._call(Command.ITERINIT, wait=wait)


    def iternext(self, wait=True):
        return self._call(Command.ITERNEXT, wait=wait)


    def fwmkeys(self, prefix, max=-1, wait=True):
        """ Return up to *max* keys beginning with *prefix*. """

        return self._call(Command.FWMKEYS, prefix, max, wait=wait)


    def addint(self, key, num, wait=True):
        return self._call(Command.ADDINT, key, num, wait=wait)


    def adddouble(self, key, num, wait=True):
        return self._call(Command.ADDDOUBLE, key, num, wait=wait)


    def ext(self, name, opts, key, value, wait=True):
        """ Call the server-side script function *name*. The *opts* may
            request record (``XOLCKREC``) or global (``XOLCKGLB``) locking.
        """

        return self._call(Command.EXT, name, opts, key, value, wait=wait)


    def sync(self, wait=True):
        return self._call(Command.SYNC, wait=wait)


    def optimize(self, params='', wait=True):
        return self._call(Command.OPTIMIZE, params, wait=wait)


    def vanish(self, wait=True):
        return self._call(Command.VANISH, wait=wait)


    def copy(self, path, wait=True):
        return self._call(Command.COPY, path, wait=wait)


    def restore(self, path, ts, opts=0, wait=True):
        """ Restore from the update log at *path*, starting at timestamp *ts*
            in microseconds.
        """

        return self._call(Command.RESTORE, path, ts, opts, wait=wait)


    def setmst(self, host, port, ts, opts=0, wait=True):
        """ Set the replication master to *host* and *port*. """

        return self._call(Command.SETMST, host, port, ts, opts, wait=wait)


    def rnum(self, wait=True):
        return self._call(Command.RNUM, wait=wait)


    def size(self, wait=True):
        return self._call(Command.SIZE, wait=wait)


    def stat(self, parse=False, wait=True):
        """ Return the server status message. With *parse* set the value is
            a dictionary instead of the raw tab-separated text.
        """

        transform = None
        if parse:
            transform = response.parse_stat

        return self._call(Command.STAT, transform=transform, wait=wait)


    def misc(self, name, opts=0, args=(), wait=True):
        """ Call the server-side function *name* with the argument list
            *args*; the value is the list of result elements.
        """

        return self._call(Command.MISC, name, opts, args, wait=wait)


    def keys(self):
        """ Iterate over every key in the database. This resets the server's
            iterator. The server signals the end of the keys with a failure
            status; connection failures raise
            :class:`~tyrant.protocol.errors.StatusError`.
        """

        self.iterinit().raise_for_status()

        while True:
            result = self.iternext()

            if result.status.is_transport:
                result.raise_for_status()

            if not result.ok:
                return

            yield result.value


    @staticmethod
    def errmsg(code):
        return constants.errmsg(code)


# end of class Hash



class Table(Hash):
    """ A connection to a tabular database. Records are mappings of column
        name to value stored under a primary key; the put, out and get
        methods take and return whole records, and are carried to the
        server as misc calls.
    """

    def _table_put(self, function, pkey, columns, wait):

        try:
            frame = request.table_put(function, pkey, columns)
        except ArgumentError as e:
            return self._failed(Command.MISC, e, wait)

        return self.submit(Command.MISC, frame, _discard, wait)


    def put(self, pkey, columns, wait=True):
        """ Store the mapping *columns* under *pkey*, replacing any existing
            record.
        """

        return self._table_put('put', pkey, columns, wait)


    def putkeep(self, pkey, columns, wait=True):
        return self._table_put('putkeep', pkey, columns, wait)


    def putcat(self, pkey, columns, wait=True):
        """ Merge *columns* into the existing record. """

        return self._table_put('putcat', pkey, columns, wait)


    def out(self, pkey, wait=True):

        try:
            frame = request.table_out(pkey)
        except ArgumentError as e:
            return self._failed(Command.MISC, e, wait)

        return self.submit(Command.MISC, frame, _discard, wait)


    def get(self, pkey, wait=True):
        """ Retrieve the record stored under *pkey*; the value is a
            :class:`~tyrant.protocol.record.Record`.
        """

        try:
            frame = request.table_get(pkey)
        except ArgumentError as e:
            return self._failed(Command.MISC, e, wait)

        encoding = self.encoding

        def transform(elements):
            # The primary key is returned in the same form as the columns.
            key = pkey
            if encoding is None:
                if isinstance(key, str):
                    key = key.encode('utf-8')
            elif isinstance(key, (bytes, bytearray, memoryview)):
                key = bytes(key).decode(encoding)

            return Record.from_pairs(elements, key)

        return self.submit(Command.MISC, frame, transform, wait)


    def setindex(self, name, type=constants.ITLEXICAL, wait=True):
        """ Create or modify the index on column *name*; *type* is one of
            the ``IT*`` index types. The value is True on success.
        """

        return self._call(Command.SETINDEX, name, type, wait=wait)


    def genuid(self, wait=True):
        """ Generate a unique primary key; the value is an integer. """

        return self._call(Command.GENUID, wait=wait)


    def query(self):
        return Query()


# end of class Table


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
