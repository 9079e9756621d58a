""" Connection settings. Values come from, in order of precedence: explicit
    arguments, ``TYRANT_*`` environment variables, the ``tyrant.json``
    settings file in the configuration directory, and the defaults below.
"""

import collections
import logging
import os
import threading

from . import json

logger = logging.getLogger(__name__)


defaults = {
    'host': 'localhost',
    'port': 1978,
    'timeout': 0,
    'transport': 'tcp',
    'encoding': 'utf-8',
}

_converters = {
    'host': str,
    'port': int,
    'timeout': float,
    'transport': str,
    'encoding': str,
}

filename = 'tyrant.json'

_cache = dict()
_cache_lock = threading.Lock()


Settings = collections.namedtuple('Settings', tuple(defaults.keys()))
Settings.__doc__ = """ An immutable set of connection settings. A timeout of
    zero means no timeout; an encoding of None means values are returned as
    bytes rather than decoded to str.
"""


def directory():
    """ Return the directory where the settings file is expected to live.
        This is the ``TYRANT_HOME`` environment variable if it is set,
        otherwise ``.tyrant`` in the user's home directory. Returns None if
        neither can be determined.
    """

    try:
        return os.environ['TYRANT_HOME']
    except KeyError:
        pass

    try:
        home = os.environ['HOME']
    except KeyError:
        return None

    return os.path.join(home, '.tyrant')


def load(path=None):
    """ Return the contents of the settings file as a dictionary. A missing
        file yields an empty dictionary. The result is cached per path.
    """

    if path is None:
        home = directory()
        if home is None:
            return dict()
        path = os.path.join(home, filename)

    with _cache_lock:
        try:
            return dict(_cache[path])
        except KeyError:
            pass

        try:
            with open(path, 'rb') as file:
                raw_json = file.read()
        except FileNotFoundError:
            loaded = dict()
        else:
            try:
                loaded = json.loads(raw_json)
            except json.DecodeError as e:
                raise ValueError('invalid settings file %s: %s' % (path, e))

            if not isinstance(loaded, dict):
                raise ValueError('settings file %s must hold a JSON object' % (path))

            logger.debug('loaded settings from %s', path)

        _cache[path] = loaded

    return dict(loaded)


def clear():
    """ Forget any cached settings files. """

    with _cache_lock:
        _cache.clear()


def _environment():

    found = dict()

    for name in defaults.keys():
        variable = 'TYRANT_' + name.upper()
        try:
            found[name] = os.environ[variable]
        except KeyError:
            continue

    return found


def settings(path=None, **overrides):
    """ Build a :class:`Settings` instance. Keyword arguments whose value is
        None are ignored, so that callers can pass their own optional
        arguments straight through.
    """

    merged = dict(defaults)

    for source in (load(path), _environment()):
        for name, value in source.items():
            if name in defaults:
                merged[name] = value

    for name, value in overrides.items():
        if name not in defaults:
            raise TypeError('unknown setting: ' + name)
        if value is not None:
            merged[name] = value

    for name, convert in _converters.items():
        value = merged[name]

        if name == 'encoding' and value in ('', 'none', 'None', False):
            merged[name] = None
            continue

        try:
            merged[name] = convert(value)
        except (TypeError, ValueError):
            raise ValueError('invalid value for setting %s: %r' % (name, value))

    return Settings(**merged)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
