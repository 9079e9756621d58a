""" Constant tables for the Tokyo Tyrant binary protocol: command
    descriptors, status codes, and the option flags understood by the
    remote server. Nothing in here is mutable; keep these in one place to
    avoid stringly-typed command handling.
"""

import enum


magic = 0xC8


class Shape(enum.Enum):
    """ The layout of a response, as described by the response header.
    """

    NONE = 'none'               # putnr, no response at all
    ACK = 'ack'                 # [code:1]
    COUNTER = 'counter'         # [code:1][value:8]
    INTEGER = 'integer'         # [code:1]([value:4])
    FIXED = 'fixed'             # [code:1]([integ:8][fract:8])
    BLOB = 'blob'               # [code:1]([size:4][buf:*])
    RECORDS = 'records'         # [code:1][rnum:4]{[ksiz:4][vsiz:4][kbuf][vbuf]}
    LIST = 'list'               # [code:1][num:4]{[siz:4][buf:*]}


class Command(enum.Enum):
    """ One member per command descriptor. Each value is a tuple of the
        opcode and the :class:`Shape` of the response; the table functions
        and the search family are all expressed as ``misc`` calls, and
        share its opcode.
    """

    PUT = (0x10, Shape.ACK)
    PUTKEEP = (0x11, Shape.ACK)
    PUTCAT = (0x12, Shape.ACK)
    PUTSHL = (0x13, Shape.ACK)
    PUTNR = (0x18, Shape.NONE)
    OUT = (0x20, Shape.ACK)
    GET = (0x30, Shape.BLOB)
    MGET = (0x31, Shape.RECORDS)
    VSIZ = (0x38, Shape.INTEGER)
    ITERINIT = (0x50, Shape.ACK)
    ITERNEXT = (0x51, Shape.BLOB)
    FWMKEYS = (0x58, Shape.LIST)
    ADDINT = (0x60, Shape.INTEGER)
    ADDDOUBLE = (0x61, Shape.FIXED)
    EXT = (0x68, Shape.BLOB)
    SYNC = (0x70, Shape.ACK)
    OPTIMIZE = (0x71, Shape.ACK)
    VANISH = (0x72, Shape.ACK)
    COPY = (0x73, Shape.ACK)
    RESTORE = (0x74, Shape.ACK)
    SETMST = (0x78, Shape.ACK)
    RNUM = (0x80, Shape.COUNTER)
    SIZE = (0x81, Shape.COUNTER)
    STAT = (0x88, Shape.BLOB)
    MISC = (0x90, Shape.LIST)

    # Table-only functions, carried over the misc opcode.

    SETINDEX = (0x90, Shape.LIST, 'setindex')
    GENUID = (0x90, Shape.LIST, 'genuid')

    # Query terminal operations, all invoking the 'search' function.

    SEARCH = (0x90, Shape.LIST, 'search')
    SEARCHOUT = (0x90, Shape.LIST, 'search', 'out')
    SEARCHGET = (0x90, Shape.LIST, 'search', 'get')
    SEARCHCOUNT = (0x90, Shape.LIST, 'search', 'count')


    @property
    def opcode(self):
        return self.value[0]


    @property
    def shape(self):
        return self.value[1]


    @property
    def function(self):
        """ The server-side function name for descriptors carried over the
            misc opcode; None for everything else.
        """

        try:
            return self.value[2]
        except IndexError:
            return None


    @property
    def expects_response(self):
        return self.shape is not Shape.NONE


    @property
    def is_search(self):
        return self in _search_family


    @property
    def marker(self):
        """ The clause closing a search query, or None if this is not a
            search command. A plain search fetches records with 'get' too.
        """

        if not self.is_search:
            return None

        try:
            return self.value[3]
        except IndexError:
            return 'get'


# end of class Command


_search_family = frozenset((Command.SEARCH, Command.SEARCHOUT,
                            Command.SEARCHGET, Command.SEARCHCOUNT))


class Status(enum.IntEnum):
    """ The error taxonomy. The server reports the first few values as the
        leading status byte of a response; the transport-level values are
        assigned locally.
    """

    SUCCESS = 0
    INVALID_OPERATION = 1
    HOST_NOT_FOUND = 2
    CONNECTION_REFUSED = 3
    SEND_ERROR = 4
    RECEIVE_ERROR = 5
    EXISTING_RECORD = 6
    NO_RECORD_FOUND = 7
    MISCELLANEOUS = 9999


    @classmethod
    def from_code(cls, code):
        """ Translate the one-byte status code from a response. Anything
            without a finer classification is :attr:`MISCELLANEOUS`.
        """

        try:
            return cls(code)
        except ValueError:
            return cls.MISCELLANEOUS


    @property
    def message(self):
        return _messages[self]


    @property
    def is_transport(self):
        """ True for failures of the connection itself, as opposed to
            failures reported by the server.
        """

        return self in _transport_failures


# end of class Status


_transport_failures = frozenset((Status.HOST_NOT_FOUND, Status.CONNECTION_REFUSED,
                                 Status.SEND_ERROR, Status.RECEIVE_ERROR))

_messages = {
    Status.SUCCESS: 'success',
    Status.INVALID_OPERATION: 'invalid operation',
    Status.HOST_NOT_FOUND: 'host not found',
    Status.CONNECTION_REFUSED: 'connection refused',
    Status.SEND_ERROR: 'send error',
    Status.RECEIVE_ERROR: 'recv error',
    Status.EXISTING_RECORD: 'existing record',
    Status.NO_RECORD_FOUND: 'no record found',
    Status.MISCELLANEOUS: 'miscellaneous error',
}


def errmsg(code):
    """ Return the human readable message for a status *code*, which may be
        a :class:`Status` member or a raw integer.
    """

    return Status.from_code(int(code)).message


# Tuning options.

TRECON = 1 << 0                 # reconnect automatically

# Scripting extension options.

XOLCKREC = 1 << 0               # record locking
XOLCKGLB = 1 << 1               # global locking

# Restore options.

ROCHKCON = 1 << 0               # consistency checking

# Miscellaneous operation options.

MONOULOG = 1 << 0               # omission of update log

# Index types for tables.

ITLEXICAL = 0                   # lexical string
ITDECIMAL = 1                   # decimal string
ITTOKEN = 2                     # token inverted index
ITQGRAM = 3                     # q-gram inverted index
ITOPT = 9998                    # optimize
ITVOID = 9999                   # void
ITKEEP = 1 << 24                # keep existing index

# Query conditions.

QCSTREQ = 0                     # string is equal to
QCSTRINC = 1                    # string is included in
QCSTRBW = 2                     # string begins with
QCSTREW = 3                     # string ends with
QCSTRAND = 4                    # string includes all tokens in
QCSTROR = 5                     # string includes at least one token in
QCSTROREQ = 6                   # string is equal to at least one token in
QCSTRRX = 7                     # string matches regular expressions of
QCNUMEQ = 8                     # number is equal to
QCNUMGT = 9                     # number is greater than
QCNUMGE = 10                    # number is greater than or equal to
QCNUMLT = 11                    # number is less than
QCNUMLE = 12                    # number is less than or equal to
QCNUMBT = 13                    # number is between two tokens of
QCNUMOREQ = 14                  # number is equal to at least one token in
QCFTSPH = 15                    # full-text search with the phrase of
QCFTSAND = 16                   # full-text search with all tokens in
QCFTSOR = 17                    # full-text search with at least one token in
QCFTSEX = 18                    # full-text search with the compound expression of
QCNEGATE = 1 << 24              # negation flag
QCNOIDX = 1 << 25               # no index flag

# Order types.

QOSTRASC = 0                    # string ascending
QOSTRDESC = 1                   # string descending
QONUMASC = 2                    # number ascending
QONUMDESC = 3                   # number descending

# Set operation types.

MSUNION = 0                     # union
MSISECT = 1                     # intersection
MSDIFF = 2                      # difference


# Fixed-point scale for adddouble, and the marker preceding a hint string.

fraction_scale = 10 ** 10
fraction_digits = 10
hint_marker = b'\x00\x00[[HINT]]\n'

# fwmkeys treats a negative maximum as unbounded.

unbounded = 1 << 31


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
