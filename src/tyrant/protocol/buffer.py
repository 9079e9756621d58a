""" Big-endian byte buffers. A :class:`Writer` accumulates the fields of an
    outgoing frame; a :class:`Reader` walks the fields of an incoming one
    with an implicit cursor.
"""

import struct

from .errors import ProtocolError, ShortRead


_uint8 = struct.Struct('>B')
_int32 = struct.Struct('>i')
_uint32 = struct.Struct('>I')
_int64 = struct.Struct('>q')
_uint64 = struct.Struct('>Q')


class Writer:
    """ Append-only accumulator for an outgoing frame. The finished frame is
        retrieved via :func:`getvalue` and is never modified afterwards.
    """

    def __init__(self):
        self.parts = list()
        self.size = 0


    def __len__(self):
        return self.size


    def _append(self, chunk):
        self.parts.append(chunk)
        self.size += len(chunk)


    def uint8(self, value):
        self._append(_uint8.pack(value))
        return self


    def int32(self, value):
        self._append(_int32.pack(value))
        return self


    def uint32(self, value):
        self._append(_uint32.pack(value))
        return self


    def int64(self, value):
        """ Write a signed 64-bit value. On the wire this is the same as two
            32-bit words, high then low.
        """

        self._append(_int64.pack(value))
        return self


    def raw(self, data):
        self._append(bytes(data))
        return self


    def getvalue(self):
        return b''.join(self.parts)


# end of class Writer



class Reader:
    """ Positional reads over a received byte sequence. Every read consumes
        exactly the bytes it declares; a read that would run past the end of
        the data raises :class:`ShortRead` and leaves the cursor untouched.

        :ivar position: The current cursor offset.
    """

    def __init__(self, data, position=0):
        self.data = data
        self.position = position


    def _take(self, count):

        end = self.position + count
        missing = end - len(self.data)

        if missing > 0:
            raise ShortRead(missing)

        chunk = self.data[self.position:end]
        self.position = end
        return chunk


    def uint8(self):
        return _uint8.unpack(self._take(1))[0]


    def int32(self):
        return _int32.unpack(self._take(4))[0]


    def uint32(self):
        return _uint32.unpack(self._take(4))[0]


    def int64(self):
        return _int64.unpack(self._take(8))[0]


    def uint64(self):
        """ Read two 32-bit words and combine them as ``(high << 32) + low``.
        """

        return _uint64.unpack(self._take(8))[0]


    def raw(self, count):
        if count < 0:
            raise ProtocolError('negative field length: %d' % (count))

        return bytes(self._take(count))


    def skip(self, count):
        """ Advance past *count* bytes without copying them. """

        if count < 0:
            raise ProtocolError('negative field length: %d' % (count))

        end = self.position + count
        missing = end - len(self.data)

        if missing > 0:
            raise ShortRead(missing)

        self.position = end


# end of class Reader


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
