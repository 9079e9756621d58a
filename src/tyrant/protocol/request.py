""" Request encoders: one function per command, each returning the complete
    request frame as an immutable bytes object. All arguments are validated
    before the first byte is written; an invalid argument raises
    :class:`~tyrant.protocol.errors.ArgumentError` and no frame is produced.

    Text arguments may be given as str (encoded as UTF-8) or as bytes.
"""

import decimal
import math

from . import constants
from .buffer import Writer
from .constants import Command
from .errors import ArgumentError
from .record import Record


_int32_min = -(1 << 31)
_int32_max = (1 << 31) - 1
_uint32_max = (1 << 32) - 1
_int64_min = -(1 << 63)
_int64_max = (1 << 63) - 1


def _bytes(value, name):
    """ Interpret *value* as a byte string argument named *name*. """

    if isinstance(value, str):
        return value.encode('utf-8')

    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)

    raise ArgumentError("'%s' must be str or bytes, not %s" % (name, type(value).__name__))


def _integer(value, name, minimum=_int32_min, maximum=_int32_max):

    if isinstance(value, bool) or not isinstance(value, int):
        raise ArgumentError("'%s' must be an integer, not %s" % (name, type(value).__name__))

    if value < minimum or value > maximum:
        raise ArgumentError("'%s' out of range: %d" % (name, value))

    return value


def _argument(value, index):
    """ Arguments to misc may also be numbers, which are sent as their
        decimal string form.
    """

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)

    return _bytes(value, 'argument %d' % (index))


def _frame(command):
    writer = Writer()
    writer.uint8(constants.magic)
    writer.uint8(command.opcode)
    return writer


def fixed_point(number):
    """ Split *number* into the (integral, fractional) pair used on the wire
        by adddouble. The fractional part is the decimal fraction multiplied
        by 10^10, truncated rather than rounded; both parts carry the sign of
        the original number.
    """

    if isinstance(number, bool) or not isinstance(number, (int, float, decimal.Decimal)):
        raise ArgumentError("'number' must be numeric, not %s" % (type(number).__name__))

    if isinstance(number, float) and not math.isfinite(number):
        raise ArgumentError("'number' must be finite: %r" % (number))

    # Work from the decimal string representation so that 0.1 is sent as
    # exactly 1000000000, not whatever the binary float expands to.

    text = format(decimal.Decimal(str(number)), 'f')

    negative = text.startswith('-')
    text = text.lstrip('-')

    whole, _, fraction = text.partition('.')
    fraction = (fraction + '0' * constants.fraction_digits)[:constants.fraction_digits]

    integral = int(whole)
    fractional = int(fraction)

    if negative:
        integral = -integral
        fractional = -fractional

    if integral < _int64_min or integral > _int64_max:
        raise ArgumentError("'number' out of range: %r" % (number))

    return integral, fractional



def _key(command, key):
    """ [magic:2][ksiz:4][kbuf:*] """

    key = _bytes(key, 'key')

    writer = _frame(command)
    writer.uint32(len(key))
    writer.raw(key)
    return writer.getvalue()


def _key_value(command, key, value):
    """ [magic:2][ksiz:4][vsiz:4][kbuf:*][vbuf:*] """

    key = _bytes(key, 'key')
    value = _bytes(value, 'value')

    writer = _frame(command)
    writer.uint32(len(key))
    writer.uint32(len(value))
    writer.raw(key)
    writer.raw(value)
    return writer.getvalue()


def _bare(command):
    """ [magic:2] """

    return _frame(command).getvalue()


def put(key, value):
    return _key_value(Command.PUT, key, value)


def putkeep(key, value):
    return _key_value(Command.PUTKEEP, key, value)


def putcat(key, value):
    return _key_value(Command.PUTCAT, key, value)


def putshl(key, value, width):
    """ [magic:2][ksiz:4][vsiz:4][width:4][kbuf:*][vbuf:*]

        A negative *width* is sent as zero.
    """

    key = _bytes(key, 'key')
    value = _bytes(value, 'value')
    width = _integer(width, 'width')

    if width < 0:
        width = 0

    writer = _frame(Command.PUTSHL)
    writer.uint32(len(key))
    writer.uint32(len(value))
    writer.uint32(width)
    writer.raw(key)
    writer.raw(value)
    return writer.getvalue()


def putnr(key, value):
    return _key_value(Command.PUTNR, key, value)


def out(key):
    return _key(Command.OUT, key)


def get(key):
    return _key(Command.GET, key)


def mget(keys):
    """ [magic:2][rnum:4]{[ksiz:4][kbuf:*]}*

        The *keys* sequence is left untouched.
    """

    if isinstance(keys, (str, bytes, bytearray)) or keys is None:
        raise ArgumentError("'keys' must be a sequence of keys")

    try:
        keys = list(keys)
    except TypeError:
        raise ArgumentError("'keys' must be a sequence of keys")

    encoded = list()
    for index, key in enumerate(keys):
        encoded.append(_bytes(key, 'key %d' % (index)))

    writer = _frame(Command.MGET)
    writer.uint32(len(encoded))

    for key in encoded:
        writer.uint32(len(key))
        writer.raw(key)

    return writer.getvalue()


def vsiz(key):
    return _key(Command.VSIZ, key)


def iterinit():
    return _bare(Command.ITERINIT)


def iternext():
    return _bare(Command.ITERNEXT)


def fwmkeys(prefix, maximum=-1):
    """ [magic:2][psiz:4][max:4][pbuf:*]

        A negative *maximum* means no limit, and is sent as 2^31.
    """

    prefix = _bytes(prefix, 'prefix')
    maximum = _integer(maximum, 'maximum', _int32_min, _uint32_max)

    if maximum < 0:
        maximum = constants.unbounded

    writer = _frame(Command.FWMKEYS)
    writer.uint32(len(prefix))
    writer.uint32(maximum)
    writer.raw(prefix)
    return writer.getvalue()


def addint(key, number):
    """ [magic:2][ksiz:4][num:4][kbuf:*] """

    key = _bytes(key, 'key')
    number = _integer(number, 'number')

    writer = _frame(Command.ADDINT)
    writer.uint32(len(key))
    writer.int32(number)
    writer.raw(key)
    return writer.getvalue()


def adddouble(key, number):
    """ [magic:2][ksiz:4][integ:8][fract:8][kbuf:*] """

    key = _bytes(key, 'key')
    integral, fractional = fixed_point(number)

    writer = _frame(Command.ADDDOUBLE)
    writer.uint32(len(key))
    writer.int64(integral)
    writer.int64(fractional)
    writer.raw(key)
    return writer.getvalue()


def ext(name, options, key, value):
    """ [magic:2][nsiz:4][opts:4][ksiz:4][vsiz:4][nbuf:*][kbuf:*][vbuf:*] """

    name = _bytes(name, 'name')
    options = _integer(options, 'options', 0, _uint32_max)
    key = _bytes(key, 'key')
    value = _bytes(value, 'value')

    writer = _frame(Command.EXT)
    writer.uint32(len(name))
    writer.uint32(options)
    writer.uint32(len(key))
    writer.uint32(len(value))
    writer.raw(name)
    writer.raw(key)
    writer.raw(value)
    return writer.getvalue()


def sync():
    return _bare(Command.SYNC)


def optimize(params=''):
    return _key(Command.OPTIMIZE, params)


def vanish():
    return _bare(Command.VANISH)


def copy(path):
    return _key(Command.COPY, path)


def restore(path, timestamp, options=0):
    """ [magic:2][psiz:4][ts:8][opts:4][pbuf:*]

        The *timestamp* is in microseconds.
    """

    path = _bytes(path, 'path')
    timestamp = _integer(timestamp, 'timestamp', _int64_min, _int64_max)
    options = _integer(options, 'options', 0, _uint32_max)

    writer = _frame(Command.RESTORE)
    writer.uint32(len(path))
    writer.int64(timestamp)
    writer.uint32(options)
    writer.raw(path)
    return writer.getvalue()


def setmst(host, port, timestamp, options=0):
    """ [magic:2][hsiz:4][port:4][ts:8][opts:4][host:*] """

    host = _bytes(host, 'host')
    port = _integer(port, 'port', 0, _uint32_max)
    timestamp = _integer(timestamp, 'timestamp', _int64_min, _int64_max)
    options = _integer(options, 'options', 0, _uint32_max)

    writer = _frame(Command.SETMST)
    writer.uint32(len(host))
    writer.uint32(port)
    writer.int64(timestamp)
    writer.uint32(options)
    writer.raw(host)
    return writer.getvalue()


def rnum():
    return _bare(Command.RNUM)


def size():
    return _bare(Command.SIZE)


def stat():
    return _bare(Command.STAT)


def misc(name, options=0, arguments=()):
    """ [magic:2][nsiz:4][opts:4][rnum:4][nbuf:*]{[asiz:4][abuf:*]}*

        Negative *options* are sent as zero. Each argument may be str,
        bytes, or a number; numbers are sent in decimal string form.
    """

    name = _bytes(name, 'name')
    options = _integer(options, 'options', _int32_min, _uint32_max)

    if options < 0:
        options = 0

    if isinstance(arguments, (str, bytes, bytearray)) or arguments is None:
        raise ArgumentError("'arguments' must be a sequence")

    encoded = list()
    for index, argument in enumerate(arguments):
        encoded.append(_argument(argument, index))

    writer = _frame(Command.MISC)
    writer.uint32(len(name))
    writer.uint32(options)
    writer.uint32(len(encoded))
    writer.raw(name)

    for argument in encoded:
        writer.uint32(len(argument))
        writer.raw(argument)

    return writer.getvalue()


# Table functions. These are all misc calls; the argument lists follow the
# conventions of the server's table database.

def table_put(function, pkey, columns):
    """ Store *columns*, a mapping of column name to value, under the primary
        key *pkey*. The *function* is one of 'put', 'putkeep', or 'putcat'.
    """

    if function not in ('put', 'putkeep', 'putcat'):
        raise ArgumentError('invalid table put function: %r' % (function))

    _bytes(pkey, 'pkey')

    try:
        items = columns.items()
    except AttributeError:
        raise ArgumentError("'columns' must be a mapping of column names to values")

    record = Record(items, pkey)

    for name in record:
        _bytes(name, 'column name')

    return misc(function, 0, record.flatten())


def table_out(pkey):
    return misc('out', 0, [_bytes(pkey, 'pkey')])


def table_get(pkey):
    """ Read-only, so the update log is always skipped. """

    return misc('get', constants.MONOULOG, [_bytes(pkey, 'pkey')])


def setindex(name, type):
    return misc('setindex', 0, [_bytes(name, 'name'), _integer(type, 'type', 0, _uint32_max)])


def genuid():
    return misc('genuid', 0, [])


def search(clauses, options=constants.MONOULOG):
    """ Submit an accumulated list of query *clauses* to the 'search'
        function.
    """

    return misc('search', options, clauses)


encoders = {
    Command.PUT: put,
    Command.PUTKEEP: putkeep,
    Command.PUTCAT: putcat,
    Command.PUTSHL: putshl,
    Command.PUTNR: putnr,
    Command.OUT: out,
    Command.GET: get,
    Command.MGET: mget,
    Command.VSIZ: vsiz,
    Command.ITERINIT: iterinit,
    Command.ITERNEXT: iternext,
    Command.FWMKEYS: fwmkeys,
    Command.ADDINT: addint,
    Command.ADDDOUBLE: adddouble,
    Command.EXT: ext,
    Command.SYNC: sync,
    Command.OPTIMIZE: optimize,
    Command.VANISH: vanish,
    Command.COPY: copy,
    Command.RESTORE: restore,
    Command.SETMST: setmst,
    Command.RNUM: rnum,
    Command.SIZE: size,
    Command.STAT: stat,
    Command.MISC: misc,
    Command.SETINDEX: setindex,
    Command.GENUID: genuid,
    Command.SEARCH: search,
    Command.SEARCHOUT: search,
    Command.SEARCHGET: search,
    Command.SEARCHCOUNT: search,
}


def encode(command, *args, **kwargs):
    """ Encode a request for the :class:`Command` *command*. Arguments are
        passed through to the per-command encoder.
    """

    try:
        encoder = encoders[command]
    except KeyError:
        raise ArgumentError('not a command descriptor: %r' % (command,))

    try:
        return encoder(*args, **kwargs)
    except TypeError as e:
        if isinstance(e, ArgumentError):
            raise
        raise ArgumentError('%s: %s' % (command.name.lower(), e))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
