""" Response decoding. The layout of a response is never inferred from the
    bytes themselves: the caller names the :class:`Command` that was sent,
    and the decoder reads exactly the fields that command's response
    declares.
"""

from . import constants
from .buffer import Reader
from .constants import Command, Shape, Status
from .message import Result
from .record import MultiValue, Record


def _read_counter(reader):
    return reader.uint64()


def _read_integer(reader):
    return reader.int32()


def _read_fixed(reader):
    """ [integ:8][fract:8], the fractional part scaled by 10^10. """

    integral = reader.int64()
    fractional = reader.int64()
    return fixed_value(integral, fractional)


def _read_blob(reader):
    size = reader.uint32()
    return reader.raw(size)


def _read_records(reader):
    """ [rnum:4]{[ksiz:4][vsiz:4][kbuf:*][vbuf:*]}* """

    count = reader.uint32()
    records = dict()

    for index in range(count):
        ksiz = reader.uint32()
        vsiz = reader.uint32()
        key = reader.raw(ksiz)
        value = reader.raw(vsiz)
        records[key] = value

    return records


def _read_list(reader):
    """ [num:4]{[siz:4][buf:*]}* """

    count = reader.uint32()
    elements = list()

    for index in range(count):
        size = reader.uint32()
        elements.append(reader.raw(size))

    return elements


_readers = {
    Shape.COUNTER: _read_counter,
    Shape.INTEGER: _read_integer,
    Shape.FIXED: _read_fixed,
    Shape.BLOB: _read_blob,
    Shape.RECORDS: _read_records,
    Shape.LIST: _read_list,
}


_fixed_sizes = {
    Shape.COUNTER: 8,
    Shape.INTEGER: 4,
    Shape.FIXED: 16,
}


class Extent:
    """ Measure the length of the response to *command* while it is still
        arriving. Each call to :func:`measure` resumes where the previous one
        stopped, so a response delivered in many fragments is walked once in
        total, rather than once per fragment.
    """

    def __init__(self, command):
        self.command = command
        self.position = 0
        self.remaining = None


    def measure(self, data):
        """ Return the length of the complete response at the start of
            *data*, or raise :class:`~tyrant.protocol.errors.ShortRead` if
            more bytes are required. *data* must only ever grow between
            calls.
        """

        shape = self.command.shape

        if shape is Shape.NONE:
            return 0

        reader = Reader(data, self.position)

        if self.position == 0:
            if reader.uint8() != Status.SUCCESS or shape is Shape.ACK:
                return 1
            self.position = 1

        if shape in _fixed_sizes:
            reader.skip(_fixed_sizes[shape])
            return reader.position

        if shape is Shape.BLOB:
            reader.skip(reader.uint32())
            return reader.position

        if self.remaining is None:
            self.remaining = reader.uint32()
            self.position = reader.position

        while self.remaining > 0:
            if shape is Shape.RECORDS:
                ksiz = reader.uint32()
                vsiz = reader.uint32()
                reader.skip(ksiz + vsiz)
            else:
                reader.skip(reader.uint32())

            self.remaining -= 1
            self.position = reader.position

        return self.position


# end of class Extent


def fixed_value(integral, fractional):
    """ Reassemble the value sent by adddouble from its integral part and
        its fractional part scaled by 10^10.
    """

    negative = integral < 0 or fractional < 0
    text = '%d.%0*d' % (abs(integral), constants.fraction_digits, abs(fractional))

    if negative:
        text = '-' + text

    return float(text)


def strip_hint(elements):
    """ Split a trailing hint off a list of search result *elements*. The
        return value is the remaining elements and the hint text, or None if
        the last element is not a hint. The input list is not modified.
    """

    if len(elements) == 0:
        return elements, None

    last = elements[-1]
    marker = constants.hint_marker

    if isinstance(last, str):
        marker = marker.decode()

    if last.startswith(marker):
        return elements[:-1], last[len(marker):]

    return elements, None


def _text(value, encoding):
    """ Convert every byte string within *value* to str. """

    if isinstance(value, bytes):
        return value.decode(encoding)

    if isinstance(value, dict):
        converted = dict()
        for key, item in value.items():
            converted[_text(key, encoding)] = _text(item, encoding)
        return converted

    if isinstance(value, list):
        return type(value)(_text(item, encoding) for item in value)

    return value


def _finish_records(records):
    """ Table values carry several columns joined with NUL bytes. """

    finished = dict()
    for key, value in records.items():
        finished[key] = MultiValue.split(value)

    return finished


def _finish_genuid(elements):
    if len(elements) == 0:
        raise ValueError('genuid response carries no unique id')
    return int(elements[0])


def _finish_setindex(elements):
    return True


def _finish_search(elements):
    """ Rows returned for a 'get' marker; only the primary keys are kept. """

    keys = list()
    for row in elements:
        keys.append(Record.from_row(row).pkey)
    return keys


def _finish_searchget(elements):
    records = list()
    for row in elements:
        records.append(Record.from_row(row))
    return records


def _finish_searchcount(elements):
    if len(elements) == 0:
        return 0
    return int(elements[0])


def _finish_searchout(elements):
    return True


_finishers = {
    Command.MGET: _finish_records,
    Command.GENUID: _finish_genuid,
    Command.SETINDEX: _finish_setindex,
    Command.SEARCH: _finish_search,
    Command.SEARCHGET: _finish_searchget,
    Command.SEARCHCOUNT: _finish_searchcount,
    Command.SEARCHOUT: _finish_searchout,
}


def decode(command, data, encoding=None):
    """ Decode the response to *command* at the start of *data*. The return
        value is a tuple of the :class:`~tyrant.protocol.message.Result` and
        the number of bytes consumed.

        A :class:`~tyrant.protocol.errors.ShortRead` is raised if *data* does
        not yet hold the complete response. If *encoding* is given, byte
        strings in the decoded value are converted to str.
    """

    if not command.expects_response:
        return Result(Status.SUCCESS), 0

    reader = Reader(data)
    status = Status.from_code(reader.uint8())

    if status != Status.SUCCESS:
        return Result(status), reader.position

    value = None
    hint = None

    try:
        read = _readers[command.shape]
    except KeyError:
        pass
    else:
        value = read(reader)

    consumed = reader.position

    # Everything past this point is interpretation of a response that has
    # already been consumed in full; a failure here does not desynchronize
    # the stream.

    try:
        if command.is_search:
            value, hint = strip_hint(value)

        if encoding is not None:
            value = _text(value, encoding)
            hint = _text(hint, encoding)

        try:
            finish = _finishers[command]
        except KeyError:
            pass
        else:
            value = finish(value)

    except ValueError as e:
        # UnicodeDecodeError is a ValueError too.
        return Result(Status.MISCELLANEOUS, error=str(e)), consumed

    return Result(status, value, hint), consumed


def parse_stat(text):
    """ Parse the body of a stat response, tab-separated name/value pairs one
        per line, into a dictionary.
    """

    if isinstance(text, bytes):
        text = text.decode('utf-8')

    parsed = dict()

    for line in text.splitlines():
        if line == '':
            continue
        name, _, value = line.partition('\t')
        parsed[name] = value

    return parsed


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
