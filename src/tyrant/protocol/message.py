""" A class representation of a queued command, and of the structured result
    delivered back to the caller once the command completes.
"""

import itertools
import threading

from .constants import Status
from .errors import StatusError


class Result:
    """ The outcome of a single command. Server-reported failures and
        transport failures alike are represented here rather than raised,
        so that a caller can tell an expected "no record" apart from a lost
        connection without exception handling.

        :ivar status: A :class:`~tyrant.protocol.constants.Status` member.
        :ivar value: The decoded value; None on failure, and for commands
            that only acknowledge.
        :ivar hint: The diagnostic hint trailing a search response, if any.
        :ivar error: Free-form text describing a local failure, if any.
    """

    def __init__(self, status=Status.SUCCESS, value=None, hint=None, error=None):

        self.status = status
        self.value = value
        self.hint = hint
        self.error = error


    def __repr__(self):

        text = 'Result(%s' % (self.status.name)

        if self.value is not None:
            text += ', value=%r' % (self.value,)
        if self.hint is not None:
            text += ', hint=%r' % (self.hint,)
        if self.error is not None:
            text += ', error=%r' % (self.error,)

        return text + ')'


    def __eq__(self, other):

        if not isinstance(other, Result):
            return NotImplemented

        mine = (self.status, self.value, self.hint)
        theirs = (other.status, other.value, other.hint)
        return mine == theirs


    __hash__ = None


    @property
    def ok(self):
        return self.status == Status.SUCCESS


    def raise_for_status(self):
        """ Raise :class:`~tyrant.protocol.errors.StatusError` if this result
            is not a success; otherwise return the decoded value.
        """

        if self.ok:
            return self.value

        raise StatusError(self.status, self.error)


# end of class Result



class Task:
    """ A :class:`Task` is one command on its way through the pipeline: the
        command descriptor, the encoded request frame, and an optional
        *transform* applied to the decoded value before it is handed back to
        the caller. The caller may block on :func:`wait`, or check on
        completion with :func:`poll`.

        :ivar id: A locally unique identification number, for logging.
        :ivar result: The :class:`Result`, once the task completes.
    """

    QUEUED = 'queued'
    SENT = 'sent'
    DONE = 'done'
    CANCELLED = 'cancelled'

    def __init__(self, command, frame, transform=None):

        self.id = _id_next()
        self.command = command
        self.frame = frame
        self.transform = transform
        self.result = None
        self.state = self.QUEUED
        self.pipeline = None

        self.done_event = threading.Event()


    def __repr__(self):
        return 'Task(%d, %s, %s)' % (self.id, self.command.name, self.state)


    @classmethod
    def failed(cls, command, status, error=None):
        """ Return a task that completed without ever being sent, such as
            one whose arguments could not be encoded.
        """

        task = cls(command, None)
        task._complete(Result(status, error=error))
        return task


    @property
    def expects_response(self):
        return self.command.expects_response


    def _complete(self, result):
        """ Locally store the result and signal any callers blocking via
            :func:`wait` to proceed.
        """

        if self.state == self.CANCELLED:
            return

        if result.ok and self.transform is not None:
            try:
                result.value = self.transform(result.value)
            except ValueError as e:
                result = Result(Status.MISCELLANEOUS, hint=result.hint, error=str(e))

        self.result = result
        self.state = self.DONE
        self.done_event.set()


    def cancel(self):
        """ Cancel the task. A task still waiting in the queue is removed
            from it and never sent; the return value is True. A task that
            has already been sent cannot be recalled, the server will still
            act on it; its response will be discarded, and the return value
            is False. A task taken from the queue but not yet written is
            not sent at all, though the return value is still False.
        """

        if self.state == self.DONE:
            return False

        if self.pipeline is None:
            removed = False
            self.state = self.CANCELLED
        else:
            removed = self.pipeline._cancel(self)

        self.done_event.set()
        return removed


    @property
    def cancelled(self):
        return self.state == self.CANCELLED


    def poll(self):
        """ Return True if the task is complete, otherwise return False.
        """

        return self.done_event.is_set()


    def wait(self, timeout=None):
        """ Block until the task has been handled. The :class:`Result` is
            always returned; it will be None if the task is still pending
            after *timeout* seconds, or if it was cancelled.
        """

        self.done_event.wait(timeout)
        return self.result


# end of class Task


_id_lock = threading.Lock()
_id_ticker = itertools.count(1)


def _id_next():
    """ Return the next task identification number. """

    with _id_lock:
        return next(_id_ticker)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
