import json

import pytest

import tyrant


def test_dumps_returns_bytes():

    encoded = tyrant.json.dumps({'host': 'localhost', 'port': 1978})

    assert isinstance(encoded, bytes)
    assert json.loads(encoded) == {'host': 'localhost', 'port': 1978}


def test_loads_accepts_str_and_bytes():

    settings = dict()
    settings['host'] = 'tyrant.example.com'
    settings['port'] = 1978
    settings['timeout'] = 2.5
    settings['encoding'] = None
    settings['list'] = [1, 'a', True, False]

    text = json.dumps(settings)

    assert tyrant.json.loads(text) == settings
    assert tyrant.json.loads(text.encode()) == settings


def test_decode_error():

    with pytest.raises(tyrant.json.DecodeError):
        tyrant.json.loads(b'{"host": ')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
