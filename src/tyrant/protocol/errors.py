""" Exceptions raised within the protocol layer. Every exception carries the
    :class:`~tyrant.protocol.constants.Status` it maps to, so that the
    pipeline can turn any failure into a structured result.
"""

from .constants import Status


class TyrantError(Exception):
    """ Base class for all errors raised by this package. """

    status = Status.MISCELLANEOUS


class ArgumentError(TyrantError, TypeError):
    """ A command was invoked with a missing or wrongly typed argument. This
        is always raised before any bytes are produced.
    """

    status = Status.INVALID_OPERATION


class ProtocolError(TyrantError):
    """ A response could not be interpreted. """

    status = Status.RECEIVE_ERROR


class ShortRead(ProtocolError):
    """ The buffer ended before a field could be read in full. While the
        transport is still open this only means more bytes are needed.

        :ivar missing: How many more bytes the failed read required.
    """

    def __init__(self, missing):
        ProtocolError.__init__(self, 'response truncated, %d more bytes required' % (missing))
        self.missing = missing


class StatusError(TyrantError):
    """ Raised by :func:`Result.raise_for_status` for unsuccessful results. """

    def __init__(self, status, text=None):

        if text is None:
            text = status.message

        TyrantError.__init__(self, text)
        self.status = status


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
