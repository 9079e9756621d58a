import json
import os

import pytest

import tyrant
from tyrant import config


def _write(tmp_path, contents):

    path = tmp_path / config.filename
    path.write_text(contents)
    config.clear()
    return path


def test_defaults():

    settings = config.settings()

    assert settings.host == 'localhost'
    assert settings.port == 1978
    assert settings.timeout == 0
    assert settings.transport == 'tcp'
    assert settings.encoding == 'utf-8'


def test_directory(tmp_path):

    assert config.directory() == str(tmp_path)


def test_directory_default(monkeypatch):

    monkeypatch.delenv('TYRANT_HOME')
    monkeypatch.setenv('HOME', '/home/someone')

    assert config.directory() == os.path.join('/home/someone', '.tyrant')


def test_precedence(monkeypatch, tmp_path):

    _write(tmp_path, json.dumps({'host': 'filehost', 'port': 3000, 'timeout': 1.5}))

    settings = config.settings()
    assert settings.host == 'filehost'
    assert settings.port == 3000
    assert settings.timeout == 1.5

    monkeypatch.setenv('TYRANT_HOST', 'envhost')
    monkeypatch.setenv('TYRANT_PORT', '4000')

    settings = config.settings()
    assert settings.host == 'envhost'
    assert settings.port == 4000
    assert settings.timeout == 1.5

    settings = config.settings(host='arghost', port=None)
    assert settings.host == 'arghost'
    assert settings.port == 4000


def test_explicit_path(tmp_path):

    path = tmp_path / 'elsewhere.json'
    path.write_text(json.dumps({'transport': 'zmq'}))

    assert config.settings(str(path)).transport == 'zmq'
    assert config.settings().transport == 'tcp'


def test_load_is_cached(tmp_path):

    _write(tmp_path, json.dumps({'host': 'first'}))
    assert config.load() == {'host': 'first'}

    (tmp_path / config.filename).write_text(json.dumps({'host': 'second'}))
    assert config.load() == {'host': 'first'}

    config.clear()
    assert config.load() == {'host': 'second'}


def test_missing_file():

    assert config.load() == dict()


def test_invalid_file(tmp_path):

    _write(tmp_path, '{"host": ')

    with pytest.raises(ValueError):
        config.load()

    _write(tmp_path, '[1, 2]')

    with pytest.raises(ValueError):
        config.load()


def test_encoding_none(monkeypatch):

    assert config.settings(encoding='none').encoding is None
    assert config.settings(encoding='').encoding is None

    monkeypatch.setenv('TYRANT_ENCODING', 'latin-1')
    assert config.settings().encoding == 'latin-1'


def test_invalid_values(monkeypatch):

    with pytest.raises(TypeError):
        config.settings(colour='blue')

    monkeypatch.setenv('TYRANT_PORT', 'eighty')

    with pytest.raises(ValueError):
        config.settings()


def test_client_uses_settings(monkeypatch):

    monkeypatch.setenv('TYRANT_HOST', 'db.example.com')
    monkeypatch.setenv('TYRANT_PORT', '1999')

    db = tyrant.Hash()

    assert db.host == 'db.example.com'
    assert db.port == 1999
    assert db.is_open == False
    assert repr(db) == 'Hash(db.example.com:1999)'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
