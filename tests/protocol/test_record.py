import pytest

from tyrant.protocol.record import MultiValue, Record


def test_multivalue_split():

    assert MultiValue.split(b'a\x00b\x00') == [b'a', b'b', b'']
    assert MultiValue.split('a\x00b') == ['a', 'b']
    assert MultiValue.split(b'') == []
    assert MultiValue.split(b'single') == [b'single']


def test_record_from_pairs():

    record = Record.from_pairs(['', 'pk', 'name', 'alice'])

    assert record.pkey == 'pk'
    assert record == {'name': 'alice'}

    record = Record.from_pairs(['name', 'bob'], pkey='given')
    assert record.pkey == 'given'

    with pytest.raises(ValueError):
        Record.from_pairs(['name'])


def test_record_from_row():

    record = Record.from_row(b'\x00pk\x00age\x0030')

    assert record.pkey == b'pk'
    assert record == {b'age': b'30'}


def test_record_equality_includes_pkey():

    assert Record({'a': '1'}, pkey='x') == Record({'a': '1'}, pkey='x')
    assert Record({'a': '1'}, pkey='x') != Record({'a': '1'}, pkey='y')


def test_record_flatten():

    record = Record({'name': 'alice', 'age': '30'}, pkey='pk')

    assert record.flatten() == ['pk', 'name', 'alice', 'age', '30']


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
