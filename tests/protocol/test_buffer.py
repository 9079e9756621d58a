import struct

import pytest

from tyrant.protocol.buffer import Reader, Writer
from tyrant.protocol.errors import ProtocolError, ShortRead


def test_writer_big_endian():

    writer = Writer()
    writer.uint8(0xC8).uint8(0x10).uint32(1).int32(-2).int64(-3)
    writer.raw(b'abc')

    expected = b'\xc8\x10' + struct.pack('>Iiq', 1, -2, -3) + b'abc'

    assert writer.getvalue() == expected
    assert len(writer) == len(expected)


def test_reader_fields():

    data = struct.pack('>BiIqQ', 255, -5, 7, -9, (3 << 32) + 4) + b'tail'
    reader = Reader(data)

    assert reader.uint8() == 255
    assert reader.int32() == -5
    assert reader.uint32() == 7
    assert reader.int64() == -9
    assert reader.uint64() == (3 << 32) + 4
    assert reader.raw(4) == b'tail'
    assert reader.position == len(data)


def test_short_read_leaves_cursor():

    reader = Reader(b'\x00\x00')

    with pytest.raises(ShortRead) as caught:
        reader.uint32()

    assert caught.value.missing == 2
    assert reader.position == 0

    # A short read is still a protocol error once the stream has ended.
    assert isinstance(caught.value, ProtocolError)


def test_raw_rejects_negative_length():

    reader = Reader(b'abc')

    with pytest.raises(ProtocolError):
        reader.raw(-1)


def test_skip():

    reader = Reader(b'\x00\x01\x02')
    reader.skip(2)

    assert reader.position == 2

    with pytest.raises(ShortRead) as caught:
        reader.skip(4)

    assert caught.value.missing == 3
    assert reader.position == 2

    with pytest.raises(ProtocolError):
        reader.skip(-1)


def test_reader_accepts_bytearray():

    reader = Reader(bytearray(b'\x00\x00\x00\x02hi'), 0)

    assert reader.raw(reader.uint32()) == b'hi'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
