""" The task pipeline: a FIFO queue of :class:`~tyrant.protocol.message.Task`
    instances feeding a single connection, with at most one task in flight
    at any time. Responses carry no identification number; they are matched
    to requests purely by order, which is why nothing is sent until the
    previous response has been fully received and decoded.
"""

import collections
import logging
import threading

from .protocol import response
from .protocol.constants import Status
from .protocol.errors import ProtocolError, ShortRead
from .protocol.message import Result
from .transport import TransportError, TransportReceiveError

logger = logging.getLogger(__name__)


class Pipeline:
    """ Serialize tasks over one *transport*. A dedicated background thread
        drains the queue; callers submit tasks from any thread and block on
        the task itself if they want the result.

        If *reconnect* is True a closed transport is reopened before the
        next task is sent; otherwise tasks submitted without an open
        transport fail with :attr:`Status.INVALID_OPERATION`.

        :ivar encoding: The text encoding for decoded values, or None to
            return bytes.
        :ivar in_flight: The task currently sent and awaiting its response.
    """

    def __init__(self, transport, encoding='utf-8', reconnect=False):

        self.transport = transport
        self.encoding = encoding
        self.reconnect = reconnect

        self.queue = collections.deque()
        self.condition = threading.Condition()
        self.in_flight = None
        self.buffer = bytearray()

        self.shutdown = False
        self.thread = threading.Thread(target=self.run)
        self.thread.daemon = True
        self.thread.start()


    def __len__(self):
        return len(self.queue)


    def submit(self, task):
        """ Append *task* to the queue and return it. """

        task.pipeline = self
        error = None

        # The shutdown flag only changes with the condition held, so a task
        # appended here is always either processed or failed by the worker.

        with self.condition:
            if self.shutdown:
                error = 'pipeline is closed'
            elif not self.transport.is_open and not self.reconnect:
                error = 'no active connection'
            else:
                self.queue.append(task)
                self.condition.notify()

        if error is not None:
            task._complete(Result(Status.INVALID_OPERATION, error=error))
            return task

        logger.debug('queued task %d (%s)', task.id, task.command.name)
        return task


    def _cancel(self, task):
        """ Mark *task* as cancelled. Returns True if it was still waiting in
            the queue and has been removed from it; False if the worker had
            already taken it.
        """

        with self.condition:
            try:
                self.queue.remove(task)
            except ValueError:
                removed = False
            else:
                removed = True

            if task.state != task.DONE:
                task.state = task.CANCELLED

        if removed:
            logger.debug('cancelled queued task %d', task.id)

        return removed


    def close(self, timeout=1.0):
        """ Stop the background thread and close the transport. Tasks still
            waiting in the queue fail with :attr:`Status.INVALID_OPERATION`.
            A task in flight is given *timeout* seconds to complete before
            the transport is closed underneath it.
        """

        with self.condition:
            self.shutdown = True
            self.condition.notify_all()

        if threading.current_thread() is not self.thread:
            self.thread.join(timeout)

        self.transport.close()


    def run(self):

        while True:
            with self.condition:
                while len(self.queue) == 0 and self.shutdown == False:
                    self.condition.wait()

                if self.shutdown == True:
                    break

                task = self.queue.popleft()
                self.in_flight = task
                task.state = task.SENT

            try:
                self._process(task)
            except Exception as e:
                # Unexpected failure; keep draining the queue.
                logger.exception('task %d failed unexpectedly', task.id)
                task._complete(Result(Status.MISCELLANEOUS, error=str(e)))
            finally:
                self.in_flight = None

        # Infinite loop exited.

        with self.condition:
            remaining = list(self.queue)
            self.queue.clear()

        for task in remaining:
            task._complete(Result(Status.INVALID_OPERATION, error='pipeline is closed'))


    def _process(self, task):
        """ Send one task, and if it expects a response, wait for it and
            decode it.
        """

        if not self.transport.is_open:
            if self.reconnect:
                try:
                    self.transport.open()
                except TransportError as e:
                    self._fail(task, e)
                    return
                self.buffer.clear()
            else:
                task._complete(Result(Status.INVALID_OPERATION, error='no active connection'))
                return

        if task.cancelled:
            logger.debug('skipped task %d, cancelled before sending', task.id)
            return

        try:
            self.transport.send(task.frame)
        except TransportError as e:
            self._fail(task, e)
            return

        logger.debug('sent task %d (%s), %d bytes', task.id, task.command.name, len(task.frame))

        if not task.expects_response:
            task._complete(Result(Status.SUCCESS))
            return

        try:
            result = self._receive(task)
        except (TransportError, ProtocolError) as e:
            self._fail(task, e)
            return

        if task.cancelled:
            logger.warning('discarded response to cancelled task %d', task.id)
            return

        logger.debug('completed task %d: %s', task.id, result.status.name)
        task._complete(result)


    def _receive(self, task):
        """ Read from the transport until the buffer holds the complete
            response to *task*. Responses may arrive in arbitrary fragments;
            the response is measured incrementally as they do, and decoded
            once it is complete.
        """

        extent = response.Extent(task.command)
        needed = 0

        while True:
            if len(self.buffer) >= needed:
                try:
                    extent.measure(self.buffer)
                except ShortRead as e:
                    needed = len(self.buffer) + e.missing
                else:
                    result, consumed = response.decode(task.command, self.buffer, self.encoding)
                    del self.buffer[:consumed]
                    return result

            chunk = self.transport.recv()

            if len(chunk) == 0:
                raise TransportReceiveError('connection closed before the response to task %d was complete' % (task.id))

            logger.debug('received %d bytes', len(chunk))
            self.buffer += chunk


    def _fail(self, task, error):
        """ Abort *task* because of a transport or protocol failure. The
            stream position is unknown afterwards, so the connection is
            dropped; queued tasks are not affected.
        """

        logger.warning('task %d (%s) failed: %s', task.id, task.command.name, error)

        self.transport.close()
        self.buffer.clear()

        task._complete(Result(error.status, error=str(error)))


# end of class Pipeline


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
