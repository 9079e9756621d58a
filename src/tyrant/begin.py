""" Implementation of the top-level :func:`connect` method. This is intended
    to be the principal entry point for users talking to a server.
"""

import atexit
import threading

from . import config
from .client import Hash, Table


_cache = dict()
_cache_lock = threading.Lock()


def connect(host=None, port=None, table=False, **kwargs):
    """ Return an open :class:`~tyrant.client.Hash` connected to *host* and
        *port*, or a :class:`~tyrant.client.Table` if *table* is True. Any
        other keyword arguments are passed to the class constructor.

        Connections are cached: asking again for the same kind of database
        on the same host and port, with the same keyword arguments, returns
        the same instance for as long as it remains open.
    """

    settings = config.settings(host=host, port=port)

    if table:
        cls = Table
    else:
        cls = Hash

    key = (cls, settings.host, settings.port, tuple(sorted(kwargs.items())))

    with _cache_lock:
        try:
            instance = _cache[key]
        except KeyError:
            pass
        else:
            if instance.is_open:
                return instance

        instance = cls(settings.host, settings.port, **kwargs)
        instance.open()
        _cache[key] = instance

    return instance


def shutdown():
    """ Close every cached connection. """

    with _cache_lock:
        instances = list(_cache.values())
        _cache.clear()

    for instance in instances:
        instance.close()


atexit.register(shutdown)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
