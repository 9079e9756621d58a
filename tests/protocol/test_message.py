import pytest

from tyrant.protocol.constants import Command, Status
from tyrant.protocol.errors import StatusError
from tyrant.protocol.message import Result, Task


def test_result_ok():

    result = Result(Status.SUCCESS, 'value')

    assert result.ok
    assert result.raise_for_status() == 'value'


def test_result_raise_for_status():

    result = Result(Status.NO_RECORD_FOUND)

    assert result.ok == False

    with pytest.raises(StatusError) as caught:
        result.raise_for_status()

    assert caught.value.status == Status.NO_RECORD_FOUND
    assert str(caught.value) == 'no record found'


def test_task_ids_increase():

    first = Task(Command.RNUM, b'')
    second = Task(Command.RNUM, b'')

    assert second.id > first.id
    assert first.state == Task.QUEUED
    assert first.poll() == False


def test_failed_task():

    task = Task.failed(Command.GET, Status.INVALID_OPERATION, 'bad key')

    assert task.poll()
    assert task.wait(0) == Result(Status.INVALID_OPERATION)
    assert task.result.error == 'bad key'


def test_transform():

    task = Task(Command.GET, b'', transform=int)
    task._complete(Result(Status.SUCCESS, '42'))

    assert task.wait() == Result(Status.SUCCESS, 42)


def test_transform_failure():

    task = Task(Command.GET, b'', transform=int)
    task._complete(Result(Status.SUCCESS, 'forty-two'))

    assert task.wait().status == Status.MISCELLANEOUS


def test_transform_skipped_on_failure():

    task = Task(Command.GET, b'', transform=int)
    task._complete(Result(Status.NO_RECORD_FOUND))

    assert task.wait() == Result(Status.NO_RECORD_FOUND)


def test_cancel_without_pipeline():

    task = Task(Command.GET, b'')

    assert task.cancel() == False
    assert task.cancelled
    assert task.wait(0) is None

    # A late completion is ignored.
    task._complete(Result(Status.SUCCESS, 'late'))
    assert task.result is None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
