""" The query builder for table searches. A :class:`Query` accumulates an
    ordered list of clauses, each a small NUL-delimited record, which are
    ultimately sent as the arguments of a misc call to the server's
    'search' function.
"""

import logging

from . import constants
from . import request
from .constants import Command
from .errors import ArgumentError

logger = logging.getLogger(__name__)

_hint = b'hint'


def _clause(*fields):
    return b'\0'.join(fields)


def _text(value, name):
    if isinstance(value, str):
        return value.encode('utf-8')
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise ArgumentError("'%s' must be str or bytes, not %s" % (name, type(value).__name__))


def _number(value):
    return isinstance(value, int) and not isinstance(value, bool)


class Query:
    """ Search conditions for a table database. Conditions, ordering and
        limits are appended in call order; each builder method returns the
        query itself so calls can be chained. A terminal method such as
        :func:`search` submits the accumulated clauses and resets the query
        to its initial state, ready to be built up again.
    """

    def __init__(self):
        self.clauses = [_hint]


    def __len__(self):
        """ The number of clauses added since the last reset. """

        return len(self.clauses) - 1


    def __repr__(self):
        return 'Query(%r)' % (self.clauses[1:],)


    def reset(self):
        self.clauses = [_hint]


    def addcond(self, name, op, expr):
        """ Add a condition on column *name*: *op* is one of the ``QC*``
            operators in :mod:`tyrant.protocol.constants`, optionally
            combined with ``QCNEGATE`` or ``QCNOIDX``, and *expr* is the
            operand.
        """

        name = _text(name, 'name')
        expr = _text(expr, 'expr')

        if not _number(op):
            raise ArgumentError("'op' must be an integer, not %s" % (type(op).__name__))

        self.clauses.append(_clause(b'addcond', name, str(op).encode(), expr))
        return self


    def setorder(self, name, type=constants.QOSTRASC):
        """ Order results by column *name*. Anything other than one of the
            ``QO*`` order types falls back to ascending string order.
        """

        name = _text(name, 'name')

        if not _number(type):
            type = constants.QOSTRASC

        self.clauses.append(_clause(b'setorder', name, str(type).encode()))
        return self


    def setlimit(self, max=-1, skip=-1):
        """ Limit the number of results to *max*, after skipping the first
            *skip*. Either defaults to -1, meaning no limit.
        """

        if not _number(max):
            max = -1
        if not _number(skip):
            skip = -1

        self.clauses.append(_clause(b'setlimit', str(max).encode(), str(skip).encode()))
        return self


    def terminate(self, command, columns=None):
        """ Append the marker clause for the terminal *command*, encode the
            complete request frame, and reset this query. Returns the frame.
            The optional *columns* restrict the columns returned by
            :attr:`Command.SEARCHGET`.
        """

        if not command.is_search:
            raise ArgumentError('not a search command: %r' % (command,))

        marker = command.marker.encode()

        if command == Command.SEARCHGET and columns:
            if isinstance(columns, (str, bytes)):
                columns = (columns,)
            names = [_text(column, 'column') for column in columns]
            marker = _clause(marker, *names)

        if command == Command.SEARCHOUT:
            options = 0
        else:
            options = constants.MONOULOG

        clauses = self.clauses + [marker]
        frame = request.search(clauses, options)

        logger.debug('query submitted with %d clauses', len(clauses))

        self.reset()
        return frame


    def _submit(self, table, command, columns=None, wait=True):

        try:
            submit = table.submit
        except AttributeError:
            raise ArgumentError('queries must be submitted to a table database')

        frame = self.terminate(command, columns)
        return submit(command, frame, wait=wait)


    def search(self, table, wait=True):
        """ Return the primary keys of all matching records. """

        return self._submit(table, Command.SEARCH, wait=wait)


    def searchout(self, table, wait=True):
        """ Remove all matching records. """

        return self._submit(table, Command.SEARCHOUT, wait=wait)


    def searchget(self, table, columns=None, wait=True):
        """ Return the matching records, optionally restricted to the named
            *columns*; the primary key is always included.
        """

        return self._submit(table, Command.SEARCHGET, columns, wait=wait)


    def searchcount(self, table, wait=True):
        """ Return the number of matching records. """

        return self._submit(table, Command.SEARCHCOUNT, wait=wait)


# end of class Query


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
